from devicedesk.core.prompts import CHAT_DEFAULT_MESSAGE
from devicedesk.graph.state import ChatTurnState


class ReplyNode:
    """Answers turns that don't start a workflow."""

    async def __call__(self, state: ChatTurnState) -> ChatTurnState:
        engine = state["engine"]
        text = state.get("final_response")
        if not text:
            classification = state.get("classification")
            text = (classification.confirmation_message if classification else None) or CHAT_DEFAULT_MESSAGE

        engine.reply(text)
        return {"final_response": text}

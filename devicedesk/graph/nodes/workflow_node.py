import logging
from devicedesk.core.errors import InvalidWorkflowStateError, WorkflowBusyError
from devicedesk.core.prompts import BUSY_MESSAGE
from devicedesk.graph.state import ChatTurnState

logger = logging.getLogger(__name__)

NOTHING_TO_CANCEL_MESSAGE = "There's nothing to cancel right now. How else can I help you?"


class WorkflowNode:
    async def __call__(self, state: ChatTurnState) -> ChatTurnState:
        engine = state["engine"]

        if state.get("command") == "cancel":
            try:
                engine.cancel()
            except InvalidWorkflowStateError:
                engine.reply(NOTHING_TO_CANCEL_MESSAGE)
            return {"final_response": engine.messages[-1].text}

        classification = state.get("classification")
        if classification is None:
            logger.warning("WorkflowNode called without a classification.")
            return {"final_response": None, "route": "reply"}

        try:
            await engine.start_action(classification.action, classification.confirmation_message)
        except WorkflowBusyError as e:
            # Another request on this session started a workflow first
            logger.info(f"Workflow start rejected: {e}")
            engine.reply(BUSY_MESSAGE)
            return {"final_response": BUSY_MESSAGE, "error": str(e)}

        return {"final_response": engine.messages[-1].text}

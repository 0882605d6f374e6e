import logging
import string
from devicedesk.core.actions import Action
from devicedesk.core.models import WorkflowState
from devicedesk.core.prompts import BUSY_MESSAGE
from devicedesk.graph.state import ChatTurnState
from devicedesk.intent.base import BaseClassifier

logger = logging.getLogger(__name__)

CANCEL_WORDS = {"cancel", "stop", "reset", "exit", "quit", "never mind", "nevermind"}


class UnderstandingNode:
    def __init__(self, classifier: BaseClassifier):
        self.classifier = classifier

    async def __call__(self, state: ChatTurnState) -> ChatTurnState:
        engine = state["engine"]
        utterance = state["utterance"]

        # Normalize: Lowercase and strip common punctuation for robust matching
        lower_input = utterance.lower().strip().strip(string.punctuation)

        # [HEURISTIC] Cancellation always takes precedence
        if lower_input in CANCEL_WORDS:
            logger.info("Heuristic: Cancel command detected.")
            return {"command": "cancel", "route": "workflow", "provider_used": "heuristic"}

        # [ACTIVE WORKFLOW] A device pick is pending; don't start anything new
        if engine.state != WorkflowState.IDLE:
            logger.info(f"Workflow busy ({engine.state.value}), skipping classification.")
            return {"route": "reply", "final_response": BUSY_MESSAGE, "provider_used": "system"}

        result = await self.classifier.classify(utterance)
        logger.info(f"Understanding result: action={result.action.value} provider={result.provider}")

        return {
            "command": "start" if result.action != Action.NONE else None,
            "route": "workflow" if result.action != Action.NONE else "reply",
            "classification": result,
            "provider_used": result.provider,
        }

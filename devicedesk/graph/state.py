from typing import TypedDict, Optional, Literal
from devicedesk.core.models import ClassificationResult
from devicedesk.workflow.engine import WorkflowEngine

class ChatTurnState(TypedDict, total=False):
    """
    State of one user turn through the chat graph.
    """
    engine: WorkflowEngine  # conversation the turn belongs to
    utterance: str

    # Understanding results
    command: Optional[Literal["start", "cancel"]]
    route: Optional[Literal["workflow", "reply"]]
    classification: Optional[ClassificationResult]

    # Response generation
    final_response: Optional[str]

    # Metadata and Debugging
    provider_used: Optional[str]
    error: Optional[str]

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from devicedesk.core.actions import Action
from devicedesk.core.models import ConversationMessage, WorkflowState

class ChatRequest(BaseModel):
    session_id: str
    message: str

class ActionRequest(BaseModel):
    session_id: str
    action: Action
    message: Optional[str] = None

class SelectDeviceRequest(BaseModel):
    session_id: str
    device_id: str

class ConversationResponse(BaseModel):
    session_id: str
    status: Literal["ok", "error"] = "ok"
    workflow_state: WorkflowState
    active_action: Action
    is_loading_devices: bool
    messages: List[ConversationMessage] = Field(default_factory=list)
    provider_used: Optional[str] = None
    trace_id: Optional[str] = None

class ErrorResponse(BaseModel):
    detail: str
    error_type: str

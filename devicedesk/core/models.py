import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from devicedesk.core.actions import Action


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeviceOS(str, Enum):
    WINDOWS = "windows"
    IOS = "ios"
    ANDROID = "android"
    MACOS = "macos"


class WorkflowState(str, Enum):
    IDLE = "idle"
    AWAITING_DEVICES = "awaiting_devices"
    AWAITING_SELECTION = "awaiting_selection"
    EXECUTING = "executing"


class Device(BaseModel):
    """A managed device as reported by the backend. Never mutated locally."""
    model_config = ConfigDict(frozen=True)

    id: str
    device_name: str
    os: DeviceOS
    is_compliant: bool
    last_sync: datetime
    serial_number: str


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    email: str
    job_title: Optional[str] = None

    @property
    def first_name(self) -> str:
        return self.display_name.split(" ")[0] if self.display_name else ""


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: Action
    confirmation_message: str
    # Diagnostic only, never shown to the user
    reasoning: Optional[str] = None
    provider: str = "keyword"


class ConversationMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Literal["user", "assistant"]
    text: str
    timestamp: datetime = Field(default_factory=_utcnow)
    action: Optional[Action] = None
    devices: Optional[List[Device]] = None
    requires_selection: bool = False

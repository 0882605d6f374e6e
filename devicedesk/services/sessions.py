import logging
import uuid
from typing import Dict, Optional
from devicedesk.backends.base import DeviceBackend
from devicedesk.core.models import UserProfile
from devicedesk.core.prompts import GREETING_MESSAGE
from devicedesk.workflow.engine import WorkflowEngine

logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    pass


class SessionRegistry:
    """
    In-memory conversations, keyed by session id. Each session owns its own
    WorkflowEngine; nothing survives a process restart.
    """

    def __init__(self, backend: DeviceBackend):
        self.backend = backend
        self._sessions: Dict[str, WorkflowEngine] = {}

    def start(self, identity: UserProfile, session_id: Optional[str] = None) -> WorkflowEngine:
        session_id = session_id or str(uuid.uuid4())
        engine = WorkflowEngine(backend=self.backend, identity=identity, session_id=session_id)
        engine.reply(GREETING_MESSAGE.format(first_name=identity.first_name or "there"))
        self._sessions[session_id] = engine
        logger.info(f"Session {session_id} started for {identity.id}")
        return engine

    def get(self, session_id: str, identity: UserProfile) -> WorkflowEngine:
        engine = self._sessions.get(session_id)
        # Sessions of other users are reported as missing
        if engine is None or engine.identity.id != identity.id:
            raise SessionNotFound(session_id)
        return engine

    def end(self, session_id: str, identity: UserProfile) -> None:
        self.get(session_id, identity)
        del self._sessions[session_id]
        logger.info(f"Session {session_id} ended")

    def __len__(self) -> int:
        return len(self._sessions)

import logging
from functools import lru_cache
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from devicedesk.backends.factory import build_device_backend
from devicedesk.core import security
from devicedesk.core.models import UserProfile
from devicedesk.core.settings import settings
from devicedesk.graph.main import build_chat_graph
from devicedesk.intent.classifier import build_intent_classifier
from devicedesk.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DEV_TOKEN_PREFIX = "dev-token-bypass"

DEV_PROFILE = UserProfile(
    id="123",
    display_name="Alex Doe",
    email="alex.doe@example.com",
    job_title="Global Supply Chain Manager",
)


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(build_device_backend())


@lru_cache(maxsize=1)
def get_chat_graph():
    # Classifier capability is decided here, once per process
    return build_chat_graph(build_intent_classifier())


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)]
) -> UserProfile:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    token = credentials.credentials

    # DEV BYPASS: "dev-token-bypass" or "dev-token-bypass:<user_id>"
    if settings.auth.allow_dev_token and token.startswith(DEV_TOKEN_PREFIX):
        parts = token.split(":", 1)
        if len(parts) > 1 and parts[1]:
            return DEV_PROFILE.model_copy(update={"id": parts[1]})
        return DEV_PROFILE

    try:
        payload = security.decode_access_token(token)
    except JWTError as e:
        logger.info(f"Token rejected: {e}")
        raise credentials_exception

    # 'sub' carries the user principal name
    email = payload.get("sub")
    if email is None:
        raise credentials_exception

    return UserProfile(
        id=str(payload.get("oid") or email),
        display_name=payload.get("name") or email,
        email=email,
        job_title=payload.get("jobTitle"),
    )

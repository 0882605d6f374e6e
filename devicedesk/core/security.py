from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt
from devicedesk.core.settings import settings

def create_access_token(
    subject: str,
    claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issues a signed token. Sign-in itself happens upstream; this is used by
    trusted front-ends and by tests.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=30))
    to_encode = {**(claims or {}), "exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.auth.secret_key, algorithm=settings.auth.algorithm)

def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.auth.secret_key, algorithms=[settings.auth.algorithm])

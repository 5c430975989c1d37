from typing import Any, Dict, Optional
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from app.core.config import settings

def create_access_token(employee_id: int, expires_minutes: Optional[int] = None, **claims: Any) -> str:
    """Signed access token for an employee"""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {"sub": str(employee_id), "type": "access", "exp": expire, **claims}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate access token"""
    try:
        # jose checks the exp claim
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    # Check token type
    if payload.get("type") != "access":
        return None

    return payload

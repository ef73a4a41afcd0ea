# =============================================================================
# devbrief/core/security.py
# =============================================================================
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status
from devbrief.core.config import settings
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "security.log")

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a dashboard access token (same shape the dashboard's auth provider issues)"""
    to_encode = data.copy()
    if expires_delta:
        if not isinstance(expires_delta, timedelta):
            logger.error("Invalid type for expires_delta, expected timedelta")
            raise ValueError("expires_delta must be a timedelta object")
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    if settings.JWT_AUDIENCE and "aud" not in to_encode:
        to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def verify_token(token: str) -> str:
    """Verify a dashboard JWT and return the user's email"""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": bool(settings.JWT_AUDIENCE)},
        )
    except JWTError:
        logger.error("JWT token verification failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    email: Optional[str] = payload.get("email") or payload.get("sub")
    if email is None:
        logger.error("Token carries neither 'email' nor 'sub'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return email

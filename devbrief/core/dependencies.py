# =============================================================================
# devbrief/core/dependencies.py
# =============================================================================
import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from devbrief.core.config import settings
from devbrief.core.security import verify_token
from devbrief.core.logger import get_module_logger
from devbrief.models.workspace import Workspace
from typing import Optional

logger = get_module_logger(__name__, "dependencies.log")

security = HTTPBearer(auto_error=False)  # Don't auto-error, handle manually

def get_current_user_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Email of the dashboard user from the Authorization header"""
    if credentials is None:
        logger.error("No token provided in Authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authentication token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return verify_token(credentials.credentials)

def get_owned_workspace(db: Session, workspace_slug: str, email: str) -> Workspace:
    """Load a workspace the caller created, or raise 404/403"""
    workspace = db.query(Workspace).filter(Workspace.slug == workspace_slug).first()
    if workspace is None:
        logger.warning(f"Workspace not found: {workspace_slug}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workspace not found")
    if workspace.created_by != email:
        logger.warning(f"User {email} denied access to workspace {workspace_slug}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this workspace")
    return workspace

def verify_internal_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> bool:
    """Bearer check for calls this service makes to itself"""
    if not settings.INTERNAL_API_KEY:
        logger.error("INTERNAL_API_KEY not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal API key not configured",
        )
    if credentials is None or not secrets.compare_digest(
        credentials.credentials.encode("utf8"),
        settings.INTERNAL_API_KEY.encode("utf8"),
    ):
        logger.warning("Rejected internal call with missing or wrong bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid internal credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return True

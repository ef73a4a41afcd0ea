# =============================================================================
# devbrief/api/v1/endpoints/workspaces.py
# =============================================================================
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from devbrief.db.session import get_db
from devbrief.core.dependencies import get_current_user_email, get_owned_workspace
from devbrief.schemas.workspace import WorkspaceCreate, WorkspaceResponse
from devbrief.services.workspace_service import WorkspaceService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "workspaces.log")

router = APIRouter()

@router.post("", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
async def create_workspace(
    workspace_data: WorkspaceCreate,
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
):
    """Create a workspace owned by the current user"""
    if WorkspaceService.get_workspace_by_slug(db, workspace_data.slug):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Workspace slug already taken")

    try:
        workspace = WorkspaceService.create_workspace(db, workspace_data, email)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Workspace slug already taken")

    return WorkspaceService.to_response(db, workspace)

@router.get("/{slug}", response_model=WorkspaceResponse, status_code=status.HTTP_200_OK)
async def get_workspace(
    slug: str,
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
):
    """Workspace with its GitHub and Slack installation status"""
    workspace = get_owned_workspace(db, slug, email)
    return WorkspaceService.to_response(db, workspace)

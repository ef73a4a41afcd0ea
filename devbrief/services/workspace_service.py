# =============================================================================
# devbrief/services/workspace_service.py
# =============================================================================
from typing import Optional
from sqlalchemy.orm import Session
from devbrief.models.workspace import Workspace
from devbrief.schemas.workspace import WorkspaceCreate, WorkspaceResponse
from devbrief.services.github_app_service import GitHubAppService
from devbrief.services.slack_service import SlackService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "workspace_service.log")

class WorkspaceService:
    @staticmethod
    def get_workspace_by_slug(db: Session, slug: str) -> Optional[Workspace]:
        """Get workspace by slug"""
        return db.query(Workspace).filter(Workspace.slug == slug).first()

    @staticmethod
    def create_workspace(db: Session, workspace_data: WorkspaceCreate, created_by: str) -> Workspace:
        """Create new workspace"""
        workspace = Workspace(**workspace_data.model_dump(), created_by=created_by)
        db.add(workspace)
        db.commit()
        db.refresh(workspace)
        logger.info(f"Workspace created: {workspace.slug} by {created_by}")
        return workspace

    @staticmethod
    def to_response(db: Session, workspace: Workspace) -> WorkspaceResponse:
        """Workspace plus the state of both integrations"""
        github = GitHubAppService.get_installation(db, workspace.slug)
        slack = SlackService.get_installation_by_workspace(db, workspace.slug)
        return WorkspaceResponse(
            id=str(workspace.id),
            slug=workspace.slug,
            name=workspace.name,
            created_by=workspace.created_by,
            created_at=workspace.created_at,
            github_installed=bool(github and github.is_complete),
            github_pending=bool(github and not github.is_complete),
            slack_installed=slack is not None,
            slack_team_name=slack.team_name if slack else None,
        )

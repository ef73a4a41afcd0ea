# =============================================================================
# devbrief/services/repo_monitor_service.py
# =============================================================================
from typing import Optional, List
from sqlalchemy.orm import Session
from devbrief.models.monitored_repo import MonitoredRepo
from devbrief.models.workspace import Workspace
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "repo_monitor_service.log")

class RepoMonitorService:
    """Which repositories a workspace wants PR summaries for"""

    @staticmethod
    def find_monitored(db: Session, repo_name: str) -> Optional[MonitoredRepo]:
        return db.query(MonitoredRepo).filter(
            MonitoredRepo.repo_name == repo_name,
            MonitoredRepo.is_monitored.is_(True),
        ).order_by(MonitoredRepo.created_at).first()

    @staticmethod
    def list_monitored(db: Session, workspace_slug: str) -> List[MonitoredRepo]:
        return db.query(MonitoredRepo).filter(
            MonitoredRepo.workspace_slug == workspace_slug,
            MonitoredRepo.is_monitored.is_(True),
        ).order_by(MonitoredRepo.repo_name).all()

    @staticmethod
    def enable(db: Session, workspace: Workspace, repo_name: str) -> MonitoredRepo:
        repo = db.query(MonitoredRepo).filter(
            MonitoredRepo.workspace_slug == workspace.slug,
            MonitoredRepo.repo_name == repo_name,
        ).first()
        if repo:
            repo.is_monitored = True
        else:
            repo = MonitoredRepo(
                workspace_id=workspace.id,
                workspace_slug=workspace.slug,
                repo_name=repo_name,
                is_monitored=True,
            )
            db.add(repo)
        db.commit()
        db.refresh(repo)
        logger.info(f"Monitoring enabled for {workspace.slug}:{repo_name}")
        return repo

    @staticmethod
    def disable(db: Session, workspace: Workspace, repo_name: str) -> int:
        deleted = db.query(MonitoredRepo).filter(
            MonitoredRepo.workspace_slug == workspace.slug,
            MonitoredRepo.repo_name == repo_name,
        ).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Monitoring disabled for {workspace.slug}:{repo_name} ({deleted} row(s) removed)")
        return deleted

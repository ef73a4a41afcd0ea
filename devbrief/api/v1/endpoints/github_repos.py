# =============================================================================
# devbrief/api/v1/endpoints/github_repos.py
# =============================================================================
from typing import Optional, Dict, Any, List
from fastapi import APIRouter, Depends, HTTPException, Query, status
import httpx
from sqlalchemy.orm import Session
from devbrief.db.session import get_db
from devbrief.core.dependencies import get_current_user_email, get_owned_workspace
from devbrief.core.exceptions import GitHubAPIError
from devbrief.schemas.github import MonitorRequest, MonitoredRepoResponse, PRSummaryResponse
from devbrief.services.github_app_service import GitHubAppService
from devbrief.services.repo_monitor_service import RepoMonitorService
from devbrief.services.pr_summary_service import PRSummaryService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "github_repos.log")

router = APIRouter()

@router.get("/repos", status_code=status.HTTP_200_OK)
async def list_repositories(
    workspace_slug: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Search query (type=search)"),
    type: str = Query("user", description="'user' for installation repositories, 'search' for public search"),
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Repositories the workspace's GitHub installation can see, or a repository search
    """
    if not workspace_slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workspace slug is required")
    get_owned_workspace(db, workspace_slug, email)

    if not GitHubAppService.is_installed(db, workspace_slug):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="GitHub not installed for this workspace")

    try:
        token = await GitHubAppService.get_workspace_token(db, workspace_slug)
        if type == "search" and q:
            repositories = await GitHubAppService.search_repositories(token, q)
        else:
            repositories = await GitHubAppService.list_installation_repositories(token)
    except GitHubAPIError as e:
        logger.error(f"GitHub repos lookup failed for {workspace_slug}: {e.message}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    except httpx.HTTPError as e:
        logger.error(f"GitHub unreachable for {workspace_slug}: {e!r}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="GitHub request failed")

    return {"repositories": repositories}

@router.get("/monitor", response_model=Dict[str, List[MonitoredRepoResponse]], status_code=status.HTTP_200_OK)
async def list_monitored_repositories(
    workspace_slug: Optional[str] = Query(None),
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
):
    if not workspace_slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workspace slug is required")
    get_owned_workspace(db, workspace_slug, email)

    repos = RepoMonitorService.list_monitored(db, workspace_slug)
    return {
        "repositories": [
            MonitoredRepoResponse(
                id=str(repo.id),
                workspace_slug=repo.workspace_slug,
                repo_name=repo.repo_name,
                is_monitored=repo.is_monitored,
                created_at=repo.created_at,
            )
            for repo in repos
        ]
    }

@router.post("/monitor", status_code=status.HTTP_200_OK)
async def set_repository_monitoring(
    body: MonitorRequest,
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
) -> Dict[str, str]:
    """
    Turn PR summaries on or off for one repository. Both directions are idempotent.
    """
    workspace = get_owned_workspace(db, body.workspace_slug, email)

    if body.is_monitored:
        RepoMonitorService.enable(db, workspace, body.repo_name)
        return {"message": "Repository added to monitoring"}

    RepoMonitorService.disable(db, workspace, body.repo_name)
    return {"message": "Repository removed from monitoring"}

@router.get("/summaries", response_model=Dict[str, List[PRSummaryResponse]], status_code=status.HTTP_200_OK)
async def list_pr_summaries(
    workspace_slug: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
):
    if not workspace_slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workspace slug is required")
    get_owned_workspace(db, workspace_slug, email)

    summaries = PRSummaryService.list_workspace_summaries(db, workspace_slug, limit)
    return {
        "summaries": [
            PRSummaryResponse(
                id=str(s.id),
                repo=s.repo,
                pr_number=s.pr_number,
                title=s.title,
                merged_at=s.merged_at,
                summary=s.summary,
                github_id=s.github_id,
                email=s.email,
                created_at=s.created_at,
            )
            for s in summaries
        ]
    }

# =============================================================================
# devbrief/api/v1/endpoints/github_install.py
# =============================================================================
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from devbrief.db.session import get_db
from devbrief.core.config import settings
from devbrief.services.github_app_service import GitHubAppService
from devbrief.utils.oauth import github_install_url, dashboard_redirect, raw_query_param
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "github_install.log")

router = APIRouter()

@router.get("/install", status_code=status.HTTP_302_FOUND)
async def github_install(workspace_slug: Optional[str] = Query(None)):
    """
    Send the browser to the GitHub App installation page
    """
    if not workspace_slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workspace slug is required")
    if not settings.GITHUB_APP_ID:
        logger.error("GITHUB_APP_ID not configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="GitHub App ID not configured")

    logger.info(f"GitHub install requested for workspace: {workspace_slug}")
    return RedirectResponse(url=github_install_url(workspace_slug), status_code=status.HTTP_302_FOUND)

@router.get("/callback", status_code=status.HTTP_302_FOUND)
async def github_callback(
    request: Request,
    setup_action: Optional[str] = Query(None),
    installation_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """
    GitHub App setup URL. The installation id is filled in later by the ``installation`` webhook.
    """
    state = raw_query_param(request, "state")
    logger.info(f"GitHub callback - setup_action={setup_action} state={state} installation_id={installation_id}")

    if not state:
        return dashboard_redirect(None, github_error="missing_state")

    if setup_action != "install":
        return dashboard_redirect(state, github_action=setup_action or "")

    try:
        GitHubAppService.record_pending_installation(db, state)
    except Exception as e:
        db.rollback()
        logger.error(f"Error storing GitHub installation for {state}: {str(e)}")
        return dashboard_redirect(state, github_error="database_error")

    logger.info(f"GitHub App installation initiated for workspace: {state}")
    return dashboard_redirect(state, github_installed="true")

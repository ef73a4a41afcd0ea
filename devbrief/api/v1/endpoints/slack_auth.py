# =============================================================================
# devbrief/api/v1/endpoints/slack_auth.py
# =============================================================================
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from devbrief.db.session import get_db
from devbrief.core.config import settings
from devbrief.services.slack_service import SlackService
from devbrief.utils.oauth import slack_authorize_url, dashboard_redirect, raw_query_param
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "slack_auth.log")

router = APIRouter()

# =============================================================================
# INSTALL REDIRECT
# =============================================================================

@router.get("/install", status_code=status.HTTP_302_FOUND)
async def slack_install(workspace: Optional[str] = Query(None, description="Workspace slug")):
    """
    Send the browser to Slack's OAuth consent screen
    """
    if not workspace:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workspace slug is required")

    if not settings.SLACK_CLIENT_ID:
        logger.error("Slack OAuth2 credentials are not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Slack client ID not configured"
        )

    logger.info(f"Slack install requested for workspace: {workspace}")
    return RedirectResponse(url=slack_authorize_url(workspace), status_code=status.HTTP_302_FOUND)

# =============================================================================
# OAUTH CALLBACK HANDLER
# =============================================================================

@router.get("/callback", status_code=status.HTTP_302_FOUND)
async def slack_callback(
    request: Request,
    code: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Handle the Slack OAuth2 callback: exchange the code and store the bot token for the workspace
    """
    state = raw_query_param(request, "state")
    logger.info("Processing Slack OAuth callback")

    if error:
        logger.error(f"Slack OAuth error: {error}")
        return dashboard_redirect(state, error="slack_installation_failed")

    if not code or not state:
        logger.error("Slack callback without code or state")
        return dashboard_redirect(state, error="invalid_oauth_response")

    try:
        token_data = await SlackService.exchange_code_for_token(code)

        if not token_data.get("ok"):
            logger.error(f"Token exchange failed: {token_data.get('error', 'unknown')}")
            return dashboard_redirect(state, error="token_exchange_failed")

        try:
            installation = SlackService.upsert_installation(db, state, token_data)
        except Exception as e:
            db.rollback()
            logger.error(f"Database error storing Slack installation: {str(e)}")
            return dashboard_redirect(state, error="database_error")

        logger.info(f"✅ Slack installed for workspace {state} (team {installation.team_name})")
        return dashboard_redirect(state, slack_installed="true")

    except Exception as e:
        logger.error(f"❌ Slack OAuth callback failed: {str(e)}", exc_info=True)
        return dashboard_redirect(state, error="installation_failed")

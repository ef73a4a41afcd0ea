# =============================================================================
# devbrief/api/v1/endpoints/slack_messages.py
# =============================================================================
from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from devbrief.db.session import get_db
from devbrief.core.dependencies import get_current_user_email, get_owned_workspace
from devbrief.schemas.slack import SendPRSummaryRequest
from devbrief.services.slack_service import SlackService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "slack_messages.log")

router = APIRouter()

@router.post("/send-pr-summary", status_code=status.HTTP_200_OK)
async def send_pr_summary(
    body: SendPRSummaryRequest,
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    DM a PR summary to a Slack user of the workspace
    """
    get_owned_workspace(db, body.workspace_slug, email)

    if not SlackService.get_installation_by_workspace(db, body.workspace_slug):
        logger.info(f"Slack not installed for workspace: {body.workspace_slug}")
        return {"success": False, "message": "Slack not installed for this workspace"}

    result = SlackService.send_pr_summary(db, body.workspace_slug, body.user_id, body.pr_summary)
    if not result.get("success"):
        logger.error(f"Error sending PR summary: {result.get('error')}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send PR summary"
        )

    return {
        "success": True,
        "message": "PR summary sent successfully",
        "result": result.get("data"),
    }

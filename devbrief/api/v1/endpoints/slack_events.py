# =============================================================================
# devbrief/api/v1/endpoints/slack_events.py
# =============================================================================
import json
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from devbrief.db.session import get_db
from devbrief.core.config import settings
from devbrief.core.signatures import verify_slack_signature, is_fresh_slack_timestamp
from devbrief.schemas.slack import SlackEnvelope
from devbrief.services.slack_service import SlackService
from devbrief.services.slack_event_service import SlackEventService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "slack_events_endpoint.log")

router = APIRouter()

@router.post("/events", status_code=status.HTTP_200_OK)
async def slack_events(request: Request, db: Session = Depends(get_db)):
    """
    Slack Events API endpoint
    """
    raw_body = await request.body()

    try:
        envelope = SlackEnvelope.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as e:
        logger.error(f"Malformed Slack event body: {str(e)}")
        return JSONResponse({"error": "Invalid payload"}, status_code=status.HTTP_400_BAD_REQUEST)

    # Slack sends the handshake before the app has a signing secret wired up
    if envelope.type == "url_verification":
        logger.info("Handling URL verification challenge")
        return {"challenge": envelope.challenge}

    if not settings.SLACK_SIGNING_SECRET:
        logger.error("SLACK_SIGNING_SECRET not configured")
        return JSONResponse({"error": "Signing secret not configured"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    timestamp = request.headers.get("x-slack-request-timestamp")
    signature = request.headers.get("x-slack-signature")
    if not is_fresh_slack_timestamp(timestamp, settings.SLACK_REQUEST_MAX_AGE_SECONDS):
        logger.warning(f"Stale or missing Slack timestamp: {timestamp}")
        return JSONResponse({"error": "Invalid signature"}, status_code=status.HTTP_401_UNAUTHORIZED)
    if not verify_slack_signature(raw_body, timestamp, signature, settings.SLACK_SIGNING_SECRET):
        logger.warning("Invalid Slack signature")
        return JSONResponse({"error": "Invalid signature"}, status_code=status.HTTP_401_UNAUTHORIZED)

    if envelope.type != "event_callback" or envelope.event is None:
        logger.info(f"Ignoring Slack envelope type: {envelope.type}")
        return {"ok": True}

    logger.info(f"Processing Slack event {envelope.event.type} ({envelope.event_id}) for team {envelope.team_id}")

    try:
        installation = SlackService.get_installation_by_team(db, envelope.team_id)
        if not installation:
            logger.warning(f"No Slack installation found for team: {envelope.team_id}")
            return {"ok": True, "message": "Installation not found"}

        SlackEventService.dispatch(db, installation, envelope.event)
    except Exception as e:
        logger.error(f"Error handling Slack event: {str(e)}", exc_info=True)
        return JSONResponse({"error": "Internal server error"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return {"ok": True}

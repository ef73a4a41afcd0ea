# =============================================================================
# devbrief/api/v1/endpoints/github_webhook.py
# =============================================================================
import json
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from devbrief.db.session import get_db
from devbrief.core.config import settings
from devbrief.core.dependencies import verify_internal_api_key
from devbrief.core.exceptions import ConfigurationError
from devbrief.core.signatures import verify_github_signature
from devbrief.schemas.github import GitHubEvent, GitHubWebhookPayload, ProcessPRRequest, ProcessPRResponse
from devbrief.services.github_webhook_service import GitHubWebhookService
from devbrief.services.pr_summary_service import PRSummaryService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "github_webhook_endpoint.log")

router = APIRouter()

@router.post("/webhook", status_code=status.HTTP_200_OK)
async def github_webhook(request: Request, db: Session = Depends(get_db)):
    """
    Receive GitHub App webhooks (pull_request, installation, installation_repositories)
    """
    raw_body = await request.body()
    signature = request.headers.get("x-hub-signature-256")
    event_name = request.headers.get("x-github-event")
    delivery_id = request.headers.get("x-github-delivery")

    logger.info(f"=== GITHUB WEBHOOK RECEIVED === event={event_name} delivery={delivery_id}")

    if not settings.GITHUB_WEBHOOK_SECRET:
        logger.error("GITHUB_WEBHOOK_SECRET not configured")
        return JSONResponse({"error": "Webhook secret not configured"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not verify_github_signature(raw_body, signature, settings.GITHUB_WEBHOOK_SECRET):
        logger.error(f"Invalid webhook signature for delivery {delivery_id}")
        return JSONResponse({"error": "Invalid signature"}, status_code=status.HTTP_403_FORBIDDEN)

    try:
        raw_payload = json.loads(raw_body)
        payload = GitHubWebhookPayload.model_validate(raw_payload)
    except (ValueError, ValidationError) as e:
        logger.error(f"Malformed webhook payload: {str(e)}")
        return JSONResponse({"error": "Invalid payload"}, status_code=status.HTTP_400_BAD_REQUEST)

    event = GitHubEvent.parse(event_name)
    if event is None:
        logger.info(f"Unhandled event type: {event_name}")
        return {"message": "Event ignored"}

    logger.info(f"Payload action: {payload.action} repository: {payload.repository.full_name if payload.repository else None}")

    try:
        await GitHubWebhookService.dispatch(db, event, payload, raw_payload)
    except ConfigurationError as e:
        logger.error(f"Configuration error while handling {event_name}: {e.message}")
        return JSONResponse({"error": e.message}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.error(f"GitHub webhook error: {str(e)}", exc_info=True)
        return JSONResponse({"error": "Internal server error"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return {"message": "Webhook processed successfully"}

@router.post("/process-pr", response_model=ProcessPRResponse, status_code=status.HTTP_200_OK)
async def process_pr(
    body: ProcessPRRequest,
    db: Session = Depends(get_db),
    authorized: bool = Depends(verify_internal_api_key),
):
    """
    Summarize a merged PR and DM the author. Called by the webhook handler only.
    """
    logger.info("=== PR PROCESSING STARTED ===")

    if not body.payload or not body.installation_id or not body.workspace_slug:
        return JSONResponse({"error": "Missing required parameters"}, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        payload = GitHubWebhookPayload.model_validate(body.payload)
    except ValidationError as e:
        logger.error(f"Forwarded payload did not validate: {str(e)}")
        return JSONResponse({"error": "Invalid payload"}, status_code=status.HTTP_400_BAD_REQUEST)

    if not payload.pull_request or not payload.repository:
        return JSONResponse({"error": "Missing pull request or repository"}, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        result = await PRSummaryService.process_merged_pr(db, payload, body.installation_id, body.workspace_slug)
    except ConfigurationError as e:
        logger.error(f"PR processing misconfigured: {e.message}")
        return JSONResponse(
            {"error": "PR processing failed", "details": e.message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except Exception as e:
        logger.error(f"PR processing error: {str(e)}", exc_info=True)
        return JSONResponse(
            {"error": "PR processing failed", "details": str(e)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return ProcessPRResponse(**result)

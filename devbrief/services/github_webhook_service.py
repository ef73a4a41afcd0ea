# =============================================================================
# devbrief/services/github_webhook_service.py
# =============================================================================
from typing import Optional, Dict, Any
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
import httpx
from devbrief.core.config import settings
from devbrief.core.exceptions import ConfigurationError
from devbrief.models.workspace import Workspace
from devbrief.schemas.github import GitHubEvent, GitHubWebhookPayload
from devbrief.services.github_app_service import GitHubAppService
from devbrief.services.repo_monitor_service import RepoMonitorService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "github_webhook.log")

PROCESS_PR_PATH = "/github/process-pr"

class PRForwardError(Exception):
    """The internal PR processor did not accept the forwarded payload"""

class GitHubWebhookService:
    """Handlers for the GitHub events this app subscribes to"""

    @staticmethod
    def _http_client() -> httpx.AsyncClient:
        return httpx.AsyncClient()

    @staticmethod
    async def dispatch(db: Session, event: GitHubEvent, payload: GitHubWebhookPayload, raw: Dict[str, Any]) -> None:
        if event is GitHubEvent.PULL_REQUEST:
            await GitHubWebhookService.handle_pull_request(db, payload, raw)
        elif event is GitHubEvent.INSTALLATION:
            GitHubWebhookService.handle_installation(db, payload)
        elif event is GitHubEvent.INSTALLATION_REPOSITORIES:
            GitHubWebhookService.handle_installation_repositories(payload)

    # -------------------------------------------------------------------------
    # pull_request
    # -------------------------------------------------------------------------

    @staticmethod
    async def handle_pull_request(db: Session, payload: GitHubWebhookPayload, raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pr = payload.pull_request
        repo = payload.repository

        if payload.action != "closed" or not pr or not pr.merged:
            logger.info("Not a merged PR, ignoring")
            return None
        if not repo:
            logger.info("Missing repository data on pull_request event")
            return None

        monitored = RepoMonitorService.find_monitored(db, repo.full_name)
        if not monitored:
            logger.info(f"Repository not monitored: {repo.full_name}")
            return None

        logger.info(f"Repository {repo.full_name} is monitored for workspace: {monitored.workspace_slug}")
        installation_id = payload.installation.id if payload.installation else None
        return await GitHubWebhookService.forward_to_processor(raw, installation_id, monitored.workspace_slug)

    @staticmethod
    async def forward_to_processor(
        raw_payload: Dict[str, Any],
        installation_id: Optional[int],
        workspace_slug: str,
    ) -> Dict[str, Any]:
        """Hand the merged PR to the internal processing endpoint"""
        if not settings.INTERNAL_API_KEY:
            raise ConfigurationError("INTERNAL_API_KEY")

        url = f"{settings.APP_BASE_URL.rstrip('/')}{settings.API_V1_STR}{PROCESS_PR_PATH}"
        logger.info(f"Forwarding to PR processor: {url}")

        async with GitHubWebhookService._http_client() as client:
            response = await client.post(
                url,
                json={
                    "payload": raw_payload,
                    "installation_id": installation_id,
                    "workspace_slug": workspace_slug,
                },
                headers={"Authorization": f"Bearer {settings.INTERNAL_API_KEY}"},
            )

        if response.status_code >= 400:
            logger.error(f"PR processing failed: {response.status_code} {response.text}")
            raise PRForwardError(f"PR processing failed with status {response.status_code}")

        result = response.json()
        logger.info(f"PR processing result: {result}")
        return result

    # -------------------------------------------------------------------------
    # installation
    # -------------------------------------------------------------------------

    @staticmethod
    def find_workspace_for_account(db: Session, login: str) -> Optional[Workspace]:
        """Workspace whose slug or name matches the GitHub login, ignoring case"""
        login_lower = login.lower()
        return db.query(Workspace).filter(
            or_(func.lower(Workspace.slug) == login_lower, func.lower(Workspace.name) == login_lower)
        ).order_by(Workspace.created_at).first()

    @staticmethod
    def handle_installation(db: Session, payload: GitHubWebhookPayload) -> None:
        installation = payload.installation
        if not installation:
            logger.info("No installation data in payload")
            return

        account = installation.account
        logger.info(
            f"GitHub App installation event: action={payload.action} "
            f"installation_id={installation.id} account={account.login if account else None}"
        )

        if payload.action == "created":
            if not account:
                logger.info("Installation created without account data")
                return
            workspace = GitHubWebhookService.find_workspace_for_account(db, account.login)
            if not workspace:
                logger.info(f"No workspace found for GitHub account: {account.login}")
                return
            GitHubAppService.complete_installation(
                db,
                workspace_slug=workspace.slug,
                installation_id=installation.id,
                github_user_id=account.id,
                github_username=account.login,
                github_email=account.email,
            )
        elif payload.action == "deleted":
            GitHubAppService.delete_installation(db, installation.id)

    @staticmethod
    def handle_installation_repositories(payload: GitHubWebhookPayload) -> None:
        installation = payload.installation
        if not installation:
            logger.info("No installation data in payload")
            return

        if payload.action == "added":
            repositories = payload.repositories_added or []
        elif payload.action == "removed":
            repositories = payload.repositories_removed or []
        else:
            repositories = []

        # Monitoring stays an explicit dashboard choice
        logger.info(
            f"Repositories {payload.action} on installation {installation.id}: "
            f"{[repo.full_name for repo in repositories]}"
        )

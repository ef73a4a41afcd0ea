# =============================================================================
# devbrief/services/github_app_service.py
# =============================================================================
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any
from jose import jwt
from sqlalchemy.orm import Session
import httpx
from devbrief.core.config import settings
from devbrief.core.exceptions import ConfigurationError, GitHubAPIError
from devbrief.models.github_installation import GitHubInstallation
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "github_app_service.log")

GITHUB_JSON = "application/vnd.github+json"
GITHUB_DIFF = "application/vnd.github.diff"
TRUNCATION_MARKER = "\n... (truncated)"

class GitHubAppService:
    """GitHub App authentication and the REST calls made with installation tokens"""

    @staticmethod
    def _http_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=settings.GITHUB_API_BASE)

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_app_jwt(now: Optional[datetime] = None) -> str:
        """RS256 JWT identifying the App, valid for ten minutes"""
        if not settings.GITHUB_APP_ID:
            raise ConfigurationError("GITHUB_APP_ID")
        if not settings.GITHUB_APP_PRIVATE_KEY:
            raise ConfigurationError("GITHUB_APP_PRIVATE_KEY")

        issued_at = now or datetime.now(timezone.utc)
        claims = {
            # backdated to absorb clock drift between us and GitHub
            "iat": int((issued_at - timedelta(seconds=60)).timestamp()),
            "exp": int((issued_at + timedelta(minutes=10)).timestamp()),
            "iss": str(settings.GITHUB_APP_ID),
        }
        return jwt.encode(claims, settings.GITHUB_APP_PRIVATE_KEY, algorithm="RS256")

    @staticmethod
    async def get_installation_token(installation_id: int) -> str:
        """Exchange the App JWT for a short-lived installation access token"""
        app_jwt = GitHubAppService.generate_app_jwt()

        async with GitHubAppService._http_client() as client:
            response = await client.post(
                f"/app/installations/{installation_id}/access_tokens",
                headers={"Authorization": f"Bearer {app_jwt}", "Accept": GITHUB_JSON},
            )

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"Installation token request failed for {installation_id}: {response.status_code} {message}")
            raise GitHubAPIError("get_installation_token", response.status_code, message)

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError):
            token = None
        if not token:
            logger.error(f"Installation token response for {installation_id} carried no token")
            raise GitHubAPIError("get_installation_token", response.status_code, "response carried no token")

        logger.info(f"Obtained installation token for installation {installation_id}")
        return token

    # -------------------------------------------------------------------------
    # Installation rows
    # -------------------------------------------------------------------------

    @staticmethod
    def get_installation(db: Session, workspace_slug: str) -> Optional[GitHubInstallation]:
        return db.query(GitHubInstallation).filter(GitHubInstallation.workspace_slug == workspace_slug).first()

    @staticmethod
    def is_installed(db: Session, workspace_slug: str) -> bool:
        installation = GitHubAppService.get_installation(db, workspace_slug)
        return installation is not None and installation.is_complete

    @staticmethod
    def record_pending_installation(db: Session, workspace_slug: str) -> GitHubInstallation:
        """
        Setup-callback side of the install: make sure a row exists for the
        workspace without clobbering fields a webhook may already have filled.
        """
        installation = GitHubAppService.get_installation(db, workspace_slug)
        if installation:
            logger.info(f"GitHub installation row already present for {workspace_slug} ({installation!r})")
            return installation

        installation = GitHubInstallation(workspace_slug=workspace_slug)
        db.add(installation)
        db.commit()
        db.refresh(installation)
        logger.info(f"Recorded pending GitHub installation for workspace: {workspace_slug}")
        return installation

    @staticmethod
    def complete_installation(
        db: Session,
        workspace_slug: str,
        installation_id: int,
        github_user_id: int,
        github_username: str,
        github_email: Optional[str],
    ) -> GitHubInstallation:
        """Webhook side of the install: fill every GitHub field"""
        installation = GitHubAppService.get_installation(db, workspace_slug)
        if installation is None:
            installation = GitHubInstallation(workspace_slug=workspace_slug)
            db.add(installation)
        installation.installation_id = installation_id
        installation.github_user_id = github_user_id
        installation.github_username = github_username
        installation.github_email = github_email
        db.commit()
        db.refresh(installation)
        logger.info(f"GitHub installation {installation_id} stored for workspace: {workspace_slug}")
        return installation

    @staticmethod
    def delete_installation(db: Session, installation_id: int) -> int:
        deleted = db.query(GitHubInstallation).filter(
            GitHubInstallation.installation_id == installation_id
        ).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Removed {deleted} GitHub installation row(s) for installation {installation_id}")
        return deleted

    @staticmethod
    async def get_workspace_token(db: Session, workspace_slug: str) -> Optional[str]:
        installation = GitHubAppService.get_installation(db, workspace_slug)
        if not installation or not installation.is_complete:
            return None
        return await GitHubAppService.get_installation_token(installation.installation_id)

    # -------------------------------------------------------------------------
    # Repositories and pull requests
    # -------------------------------------------------------------------------

    @staticmethod
    async def list_installation_repositories(token: str) -> List[Dict[str, Any]]:
        async with GitHubAppService._http_client() as client:
            response = await client.get(
                "/installation/repositories",
                headers={"Authorization": f"Bearer {token}", "Accept": GITHUB_JSON},
            )
        if response.status_code >= 400:
            raise GitHubAPIError("list_installation_repositories", response.status_code, _error_message(response))
        return response.json().get("repositories") or []

    @staticmethod
    async def search_repositories(token: str, query: str) -> List[Dict[str, Any]]:
        async with GitHubAppService._http_client() as client:
            response = await client.get(
                "/search/repositories",
                params={"q": query, "per_page": 20},
                headers={"Authorization": f"Bearer {token}", "Accept": GITHUB_JSON},
            )
        if response.status_code >= 400:
            raise GitHubAPIError("search_repositories", response.status_code, _error_message(response))
        return response.json().get("items") or []

    @staticmethod
    async def fetch_pr_diff(token: str, repo_full_name: str, pr_number: int) -> str:
        async with GitHubAppService._http_client() as client:
            response = await client.get(
                f"/repos/{repo_full_name}/pulls/{pr_number}",
                headers={"Authorization": f"Bearer {token}", "Accept": GITHUB_DIFF},
            )
        if response.status_code >= 400:
            raise GitHubAPIError("fetch_pr_diff", response.status_code, _error_message(response))
        logger.info(f"Fetched diff for {repo_full_name}#{pr_number} ({len(response.text)} chars)")
        return response.text

    @staticmethod
    def truncate_diff(diff: str, max_chars: Optional[int] = None) -> str:
        """
        Keep the first ``max_chars`` characters and mark the cut.

        Applying it to its own output returns that output unchanged.
        """
        limit = settings.DIFF_MAX_CHARS if max_chars is None else max_chars
        if len(diff) <= limit:
            return diff
        return diff[:limit] + TRUNCATION_MARKER


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or response.reason_phrase
    except (ValueError, AttributeError):
        return response.reason_phrase

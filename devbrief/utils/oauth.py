# =============================================================================
# devbrief/utils/oauth.py
# =============================================================================
from typing import Optional
from urllib.parse import urlencode, quote, parse_qs
from fastapi import Request, status
from fastapi.responses import RedirectResponse
from devbrief.core.config import settings
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "oauth.log")

SLACK_AUTHORIZE_URL = "https://slack.com/oauth/v2/authorize"

def slack_authorize_url(workspace_slug: str) -> str:
    """Slack consent screen; the workspace slug rides along in ``state``"""
    query = urlencode({
        "client_id": settings.SLACK_CLIENT_ID,
        "scope": settings.SLACK_SCOPES,
        "redirect_uri": settings.SLACK_REDIRECT_URI,
        "state": workspace_slug,
    })
    return f"{SLACK_AUTHORIZE_URL}?{query}"

def github_install_url(workspace_slug: str) -> str:
    """GitHub App installation page; GitHub hands ``state`` back to the setup URL"""
    return (
        f"https://github.com/apps/{settings.GITHUB_APP_SLUG}/installations/new"
        f"?{urlencode({'state': workspace_slug})}"
    )

def raw_query_param(request: Request, name: str) -> Optional[str]:
    """
    Read a query parameter keeping a literal ``+`` as ``+``.

    ``state=team+one`` yields ``team+one``, not ``team one``; percent
    escapes such as ``%2B`` are still decoded.
    """
    values = parse_qs(request.url.query.replace("+", "%2B")).get(name)
    return values[0] if values else None

def dashboard_redirect(workspace_slug: Optional[str], **params: str) -> RedirectResponse:
    """Redirect back to the workspace dashboard with status flags in the query string"""
    base = settings.FRONTEND_BASE_URL.rstrip("/")
    path = f"/dashboard/{quote(workspace_slug, safe='')}" if workspace_slug else "/dashboard"
    redirect_url = f"{base}{path}?{urlencode(params)}"
    logger.info(f"🎯 Redirecting to dashboard: {redirect_url}")
    return RedirectResponse(url=redirect_url, status_code=status.HTTP_302_FOUND)

# =============================================================================
# devbrief/api/v1/api.py
# =============================================================================
from fastapi import APIRouter
from devbrief.api.v1.endpoints import (
    github_install,
    github_repos,
    github_webhook,
    slack_auth,
    slack_events,
    slack_messages,
    workspaces,
)

api_router = APIRouter()

api_router.include_router(workspaces.router, prefix="/workspaces", tags=["Workspaces"])
api_router.include_router(github_webhook.router, prefix="/github", tags=["GitHub Webhooks"])
api_router.include_router(github_install.router, prefix="/github", tags=["GitHub Installation"])
api_router.include_router(github_repos.router, prefix="/github", tags=["GitHub Repositories"])
api_router.include_router(slack_events.router, prefix="/slack", tags=["Slack Events"])
api_router.include_router(slack_auth.router, prefix="/slack", tags=["Slack Installation"])
api_router.include_router(slack_messages.router, prefix="/slack", tags=["Slack Messages"])

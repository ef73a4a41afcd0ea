# =============================================================================
# devbrief/schemas/github.py
# =============================================================================
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

class GitHubEvent(str, Enum):
    """Values of the ``X-GitHub-Event`` header this service reacts to"""
    PULL_REQUEST = "pull_request"
    INSTALLATION = "installation"
    INSTALLATION_REPOSITORIES = "installation_repositories"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["GitHubEvent"]:
        try:
            return cls(value)
        except ValueError:
            return None

class _Payload(BaseModel):
    # GitHub payloads carry far more than we read
    model_config = ConfigDict(extra="allow")

class GitHubAccount(_Payload):
    id: int
    login: str
    email: Optional[str] = None
    type: Optional[str] = None

class GitHubInstallationRef(_Payload):
    id: int
    account: Optional[GitHubAccount] = None

class GitHubRepositoryOwner(_Payload):
    login: str

class GitHubRepositoryRef(_Payload):
    id: Optional[int] = None
    name: str
    full_name: str
    owner: Optional[GitHubRepositoryOwner] = None

class GitHubUser(_Payload):
    id: Optional[int] = None
    login: str
    email: Optional[str] = None

class GitHubPullRequest(_Payload):
    number: int
    title: str
    body: Optional[str] = None
    merged: bool = False
    merged_at: Optional[datetime] = None
    user: GitHubUser
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0

class GitHubWebhookPayload(_Payload):
    action: Optional[str] = None
    installation: Optional[GitHubInstallationRef] = None
    repository: Optional[GitHubRepositoryRef] = None
    pull_request: Optional[GitHubPullRequest] = None
    repositories_added: Optional[List[GitHubRepositoryRef]] = None
    repositories_removed: Optional[List[GitHubRepositoryRef]] = None

class ProcessPRRequest(BaseModel):
    """Body the webhook forwards to the internal PR processor"""
    payload: Optional[Dict[str, Any]] = None
    installation_id: Optional[int] = None
    workspace_slug: Optional[str] = None

class ProcessPRResponse(BaseModel):
    message: str
    summary: Optional[str] = None
    slack_user: Optional[str] = None
    delivered: bool = False

class MonitorRequest(BaseModel):
    workspace_slug: str = Field(..., min_length=1)
    repo_name: str = Field(..., min_length=1)
    is_monitored: bool

class MonitoredRepoResponse(BaseModel):
    id: str
    workspace_slug: str
    repo_name: str
    is_monitored: bool
    created_at: datetime

class PRSummaryResponse(BaseModel):
    id: str
    repo: str
    pr_number: Optional[int] = None
    title: str
    merged_at: Optional[datetime] = None
    summary: str
    github_id: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime

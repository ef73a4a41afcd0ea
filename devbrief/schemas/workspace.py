# =============================================================================
# devbrief/schemas/workspace.py
# =============================================================================
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

class WorkspaceCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9][A-Za-z0-9_.+-]*$")
    name: str = Field(..., min_length=1)

class WorkspaceResponse(BaseModel):
    id: str
    slug: str
    name: str
    created_by: str
    created_at: datetime
    github_installed: bool = False
    github_pending: bool = False
    slack_installed: bool = False
    slack_team_name: Optional[str] = None

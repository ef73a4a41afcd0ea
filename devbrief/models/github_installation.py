# =============================================================================
# devbrief/models/github_installation.py
# =============================================================================
from sqlalchemy import Column, String, BigInteger
from devbrief.db.base import BaseModel

class GitHubInstallation(BaseModel):
    """
    GitHub App installation for a workspace.

    The setup callback creates the row with only ``workspace_slug`` set (pending);
    the ``installation.created`` webhook fills in the GitHub fields afterwards.
    """
    __tablename__ = "github_installations"

    workspace_slug = Column(String, unique=True, nullable=False, index=True)
    installation_id = Column(BigInteger, nullable=True, index=True)
    github_user_id = Column(BigInteger, nullable=True)
    github_username = Column(String, nullable=True)
    github_email = Column(String, nullable=True)

    @property
    def is_complete(self) -> bool:
        return self.installation_id is not None

    def __repr__(self):
        state = self.installation_id if self.is_complete else "pending"
        return f"<GitHubInstallation {self.workspace_slug} ({state})>"

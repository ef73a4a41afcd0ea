# =============================================================================
# devbrief/models/monitored_repo.py
# =============================================================================
from sqlalchemy import Column, String, Boolean, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from devbrief.db.base import BaseModel

class MonitoredRepo(BaseModel):
    __tablename__ = "repos"
    __table_args__ = (
        UniqueConstraint("workspace_slug", "repo_name", name="uq_repos_workspace_repo"),
    )

    workspace_id = Column(Uuid(as_uuid=True), ForeignKey("workspaces.id"), nullable=False, index=True)
    workspace_slug = Column(String, nullable=False, index=True)
    repo_name = Column(String, nullable=False, index=True)  # owner/name
    is_monitored = Column(Boolean, default=True, nullable=False)

    workspace = relationship("Workspace", back_populates="repos")

    def __repr__(self):
        return f"<MonitoredRepo {self.workspace_slug}:{self.repo_name}>"

# =============================================================================
# devbrief/models/workspace.py
# =============================================================================
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from devbrief.db.base import BaseModel

class Workspace(BaseModel):
    __tablename__ = "workspaces"

    slug = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_by = Column(String, nullable=False, index=True)  # creator email

    repos = relationship("MonitoredRepo", back_populates="workspace", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Workspace {self.slug}>"

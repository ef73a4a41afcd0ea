# =============================================================================
# devbrief/models/pr_summary.py
# =============================================================================
from sqlalchemy import Column, String, DateTime, Text, Integer
from devbrief.db.base import BaseModel

class PRSummary(BaseModel):
    __tablename__ = "pr_summaries"

    repo = Column(String, nullable=False, index=True)  # owner/name
    pr_number = Column(Integer, nullable=True)
    title = Column(String, nullable=False)
    merged_at = Column(DateTime(timezone=True), nullable=True)
    summary = Column(Text, nullable=False)
    github_id = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)

    def __repr__(self):
        return f"<PRSummary {self.repo}#{self.pr_number} - {self.title[:50]}>"

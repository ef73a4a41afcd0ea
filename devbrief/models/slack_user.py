# =============================================================================
# devbrief/models/slack_user.py
# =============================================================================
from sqlalchemy import Column, String, DateTime, UniqueConstraint
from devbrief.db.base import BaseModel

class SlackUser(BaseModel):
    __tablename__ = "slack_users"
    __table_args__ = (
        UniqueConstraint("workspace_slug", "slack_user_id", name="uq_slack_users_workspace_user"),
    )

    workspace_slug = Column(String, nullable=False, index=True)
    slack_user_id = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True, index=True)  # cached from users.info
    real_name = Column(String, nullable=True)
    display_name = Column(String, nullable=True)
    github_email = Column(String, nullable=True, index=True)  # supplied by the user over DM
    first_interaction_at = Column(DateTime(timezone=True), nullable=True)
    last_interaction_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<SlackUser {self.workspace_slug}:{self.slack_user_id}>"

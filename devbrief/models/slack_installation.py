# =============================================================================
# devbrief/models/slack_installation.py
# =============================================================================
from sqlalchemy import Column, String, DateTime, Text
from devbrief.db.base import BaseModel, utcnow

class SlackInstallation(BaseModel):
    __tablename__ = "slack_installations"

    workspace_slug = Column(String, unique=True, nullable=False, index=True)
    team_id = Column(String, nullable=False, index=True)
    team_name = Column(String, nullable=True)
    access_token = Column(Text, nullable=False)  # xoxb- bot token
    bot_user_id = Column(String, nullable=True)
    scope = Column(Text, nullable=True)
    installed_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<SlackInstallation {self.workspace_slug} team={self.team_id}>"

# =============================================================================
# devbrief/schemas/slack.py
# =============================================================================
from enum import Enum
from typing import Optional, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field

class SlackEventType(str, Enum):
    APP_HOME_OPENED = "app_home_opened"
    APP_MENTION = "app_mention"
    MESSAGE = "message"
    TEAM_JOIN = "team_join"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SlackEventType"]:
        try:
            return cls(value)
        except ValueError:
            return None

class SlackEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    # team_join delivers the whole user object, every other event just the id
    user: Optional[Union[str, Dict[str, Any]]] = None
    text: Optional[str] = None
    channel: Optional[str] = None
    channel_type: Optional[str] = None
    bot_id: Optional[str] = None
    subtype: Optional[str] = None

    @property
    def user_id(self) -> Optional[str]:
        if isinstance(self.user, dict):
            return self.user.get("id")
        return self.user

class SlackEnvelope(BaseModel):
    """Outer body of every Events API request"""
    model_config = ConfigDict(extra="allow")

    type: str
    challenge: Optional[str] = None
    team_id: Optional[str] = None
    event_id: Optional[str] = None
    event: Optional[SlackEvent] = None

class SendPRSummaryRequest(BaseModel):
    workspace_slug: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    pr_summary: str = Field(..., min_length=1)

# =============================================================================
# devbrief/core/exceptions.py
# =============================================================================
from typing import Dict, Optional

ExtraInfoType = Dict[str, Optional[str]]


class DevBriefError(Exception):
    """Base error for DevBrief services."""

    status_code: int = 500

    def __init__(self, message: str, extra_info: Optional[ExtraInfoType] = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join(f"{key}: {value}" for key, value in extra_info.items() if value is not None) + ")"
        self.message = msg
        super().__init__(msg)


class ConfigurationError(DevBriefError):
    """A required secret or setting is missing."""

    def __init__(self, setting: str):
        super().__init__(f"{setting} is not configured", extra_info={"setting": setting})
        self.setting = setting


class GitHubAPIError(DevBriefError):
    """GitHub answered with a non-success status."""

    status_code = 502

    def __init__(self, action: str, status: Optional[int] = None, message: Optional[str] = None):
        super().__init__(
            "GitHub API request failed",
            extra_info={"action": action, "status": str(status) if status is not None else None, "message": message},
        )
        self.action = action
        self.status = status


# =============================================================================
# devbrief/services/email_parser_service.py
# =============================================================================
import re
from typing import Optional
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "email_parser.log")

EMAIL_CHARS = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"

# "my github email is a@b.com", "github email is a@b.com", "github: a@b.com"
GITHUB_EMAIL_PHRASE = re.compile(
    rf"(?:github email is|my github email is|github:)\s*({EMAIL_CHARS})",
    re.IGNORECASE,
)
BARE_EMAIL = re.compile(rf"^{EMAIL_CHARS}$")
BARE_EMAIL_MAX_LENGTH = 100

class EmailParserService:
    """Pull a GitHub email address out of a Slack DM"""

    @staticmethod
    def is_valid_email(email: str) -> bool:
        return bool(BARE_EMAIL.match(email))

    @staticmethod
    def extract_github_email(message: Optional[str]) -> Optional[str]:
        """
        Return the GitHub email a user typed, or None.

        The phrase form is tried first. A message is only taken as a bare
        address when the whole trimmed text is an email and stays short.
        """
        text = (message or "").lower()

        match = GITHUB_EMAIL_PHRASE.search(text)
        if match:
            logger.info("GitHub email found via phrase pattern")
            return match.group(1)

        trimmed = text.strip()
        if len(trimmed) < BARE_EMAIL_MAX_LENGTH and BARE_EMAIL.match(trimmed):
            logger.info("Message is a bare email address")
            return trimmed

        return None

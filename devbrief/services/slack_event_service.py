# =============================================================================
# devbrief/services/slack_event_service.py
# =============================================================================
from typing import Optional
from sqlalchemy.orm import Session
from devbrief.models.slack_installation import SlackInstallation
from devbrief.schemas.slack import SlackEvent, SlackEventType
from devbrief.services.email_parser_service import EmailParserService
from devbrief.services.slack_service import SlackService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "slack_events.log")

WELCOME_BACK_MESSAGE = """✅ *Welcome back to DevBrief!*

Your GitHub email is set to: `{github_email}`

You'll receive PR summaries for your weekly updates. If you need to update your email, please contact your admin."""

ONBOARDING_MESSAGE = """🚀 *Welcome to DevBrief!*

I'll help you with weekly and daily updates by sending you concise PR summaries via DM.

*To get started, please reply with your GitHub email:*
"My GitHub email is your-email@example.com"

This helps me send you personalized PR summaries for your weekly updates!"""

EMAIL_SAVED_MESSAGE = """✅ *GitHub email saved!*

Your GitHub email `{github_email}` has been saved. You'll now receive PR summaries for your weekly updates!"""

class SlackEventService:
    """One handler per Events API event type; each runs on its own"""

    @staticmethod
    def dispatch(db: Session, installation: SlackInstallation, event: SlackEvent) -> None:
        event_type = SlackEventType.parse(event.type)
        if event_type is SlackEventType.APP_HOME_OPENED:
            SlackEventService.handle_app_home_opened(db, installation, event)
        elif event_type in (SlackEventType.APP_MENTION, SlackEventType.TEAM_JOIN):
            SlackEventService.cache_profile(db, installation, event.user_id)
        elif event_type is SlackEventType.MESSAGE:
            SlackEventService.handle_message(db, installation, event)
        else:
            logger.info(f"Unhandled event type: {event.type}")

    @staticmethod
    def cache_profile(db: Session, installation: SlackInstallation, slack_user_id: Optional[str]) -> bool:
        """Fetch users.info and store the profile when it exposes an email"""
        if not slack_user_id:
            return False
        user_info = SlackService.get_user_info(installation.access_token, slack_user_id)
        if not user_info or not (user_info.get("profile") or {}).get("email"):
            logger.info(f"No email found for Slack user: {slack_user_id}")
            return False
        SlackService.store_user_mapping(db, installation.workspace_slug, user_info)
        return True

    @staticmethod
    def welcome_message(github_email: Optional[str]) -> str:
        if github_email:
            return WELCOME_BACK_MESSAGE.format(github_email=github_email)
        return ONBOARDING_MESSAGE

    @staticmethod
    def handle_app_home_opened(db: Session, installation: SlackInstallation, event: SlackEvent) -> None:
        slack_user_id = event.user_id
        logger.info(f"User opened app home: {slack_user_id}")

        slack_user = SlackService.get_user(db, installation.workspace_slug, slack_user_id)
        github_email = slack_user.github_email if slack_user else None
        is_first_time = slack_user is None or slack_user.first_interaction_at is None

        if is_first_time or not github_email:
            text = SlackEventService.welcome_message(github_email)
            SlackService.send_slack_message(
                access_token=installation.access_token,
                channel=slack_user_id,
                text=text,
                blocks=[{"type": "section", "text": {"type": "mrkdwn", "text": text}}],
            )
        else:
            logger.info("User already has GitHub email, skipping welcome message")

        SlackEventService.cache_profile(db, installation, slack_user_id)

    @staticmethod
    def handle_message(db: Session, installation: SlackInstallation, event: SlackEvent) -> None:
        if event.channel_type != "im":
            return
        # Our own replies and edits come back as message events too
        if event.bot_id or event.subtype:
            logger.debug(f"Ignoring message subtype={event.subtype} bot_id={event.bot_id}")
            return

        slack_user_id = event.user_id
        logger.info(f"Processing DM from user: {slack_user_id}")

        github_email = EmailParserService.extract_github_email(event.text)
        if not github_email:
            SlackEventService.cache_profile(db, installation, slack_user_id)
            return

        try:
            SlackService.set_github_email(db, installation.workspace_slug, slack_user_id, github_email)
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating GitHub email for {slack_user_id}: {str(e)}")
            return

        SlackService.send_slack_message(
            access_token=installation.access_token,
            channel=event.channel or slack_user_id,
            text=EMAIL_SAVED_MESSAGE.format(github_email=github_email),
        )

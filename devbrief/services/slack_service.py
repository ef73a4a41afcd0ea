# =============================================================================
# devbrief/services/slack_service.py
# =============================================================================
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from sqlalchemy import or_
from sqlalchemy.orm import Session
import httpx
import requests
from devbrief.core.config import settings
from devbrief.models.slack_installation import SlackInstallation
from devbrief.models.slack_user import SlackUser
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "slack_service.log")

class SlackService:
    """Slack Web API calls and the Slack tables they feed"""

    SLACK_API_BASE = "https://slack.com/api"

    # -------------------------------------------------------------------------
    # Installations
    # -------------------------------------------------------------------------

    @staticmethod
    def get_installation_by_workspace(db: Session, workspace_slug: str) -> Optional[SlackInstallation]:
        return db.query(SlackInstallation).filter(SlackInstallation.workspace_slug == workspace_slug).first()

    @staticmethod
    def get_installation_by_team(db: Session, team_id: str) -> Optional[SlackInstallation]:
        return db.query(SlackInstallation).filter(SlackInstallation.team_id == team_id).first()

    @staticmethod
    def upsert_installation(db: Session, workspace_slug: str, token_data: Dict[str, Any]) -> SlackInstallation:
        """Create or replace the workspace's Slack installation from an oauth.v2.access response"""
        team = token_data.get("team") or {}
        fields = {
            "team_id": team.get("id"),
            "team_name": team.get("name"),
            "access_token": token_data.get("access_token"),
            "bot_user_id": token_data.get("bot_user_id"),
            "scope": token_data.get("scope"),
            "installed_at": datetime.now(timezone.utc),
        }

        installation = SlackService.get_installation_by_workspace(db, workspace_slug)
        if installation:
            for field, value in fields.items():
                setattr(installation, field, value)
            logger.info(f"Updated Slack installation for workspace: {workspace_slug}")
        else:
            installation = SlackInstallation(workspace_slug=workspace_slug, **fields)
            db.add(installation)
            logger.info(f"Created Slack installation for workspace: {workspace_slug}")
        db.commit()
        db.refresh(installation)
        return installation

    @staticmethod
    async def exchange_code_for_token(code: str) -> Dict[str, Any]:
        """
        Exchange an OAuth authorization code for a bot token using oauth.v2.access
        """
        url = f"{SlackService.SLACK_API_BASE}/oauth.v2.access"
        data = {
            "client_id": settings.SLACK_CLIENT_ID,
            "client_secret": settings.SLACK_CLIENT_SECRET,
            "code": code,
            "redirect_uri": settings.SLACK_REDIRECT_URI,
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, data=data)
                return response.json()
        except Exception as e:
            logger.error(f"HTTP error during token exchange: {str(e)}")
            return {"ok": False, "error": str(e)}

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @staticmethod
    def get_user(db: Session, workspace_slug: str, slack_user_id: str) -> Optional[SlackUser]:
        return db.query(SlackUser).filter(
            SlackUser.workspace_slug == workspace_slug,
            SlackUser.slack_user_id == slack_user_id,
        ).first()

    @staticmethod
    def find_user_by_email(db: Session, workspace_slug: str, email: Optional[str]) -> Optional[SlackUser]:
        """Match a PR author's email against cached profile email or the user-supplied GitHub email"""
        if not email:
            return None
        return db.query(SlackUser).filter(
            SlackUser.workspace_slug == workspace_slug,
            or_(SlackUser.email == email, SlackUser.github_email == email),
        ).order_by(SlackUser.created_at).first()

    @staticmethod
    def store_user_mapping(db: Session, workspace_slug: str, user_info: Dict[str, Any]) -> SlackUser:
        """Cache a users.info profile, creating the row on first contact"""
        profile = user_info.get("profile") or {}
        now = datetime.now(timezone.utc)

        slack_user = SlackService.get_user(db, workspace_slug, user_info["id"])
        if slack_user:
            slack_user.email = profile.get("email") or ""
            slack_user.real_name = user_info.get("real_name") or ""
            slack_user.display_name = profile.get("display_name") or ""
            slack_user.last_interaction_at = now
            logger.info(f"Updated Slack user mapping {workspace_slug}:{slack_user.slack_user_id}")
        else:
            slack_user = SlackUser(
                workspace_slug=workspace_slug,
                slack_user_id=user_info["id"],
                email=profile.get("email") or "",
                real_name=user_info.get("real_name") or "",
                display_name=profile.get("display_name") or "",
                first_interaction_at=now,
                last_interaction_at=now,
            )
            db.add(slack_user)
            logger.info(f"Inserted Slack user mapping {workspace_slug}:{slack_user.slack_user_id}")
        db.commit()
        db.refresh(slack_user)
        return slack_user

    @staticmethod
    def set_github_email(db: Session, workspace_slug: str, slack_user_id: str, github_email: str) -> SlackUser:
        """Record the GitHub email a user sent over DM"""
        now = datetime.now(timezone.utc)
        slack_user = SlackService.get_user(db, workspace_slug, slack_user_id)
        if slack_user is None:
            slack_user = SlackUser(
                workspace_slug=workspace_slug,
                slack_user_id=slack_user_id,
                first_interaction_at=now,
            )
            db.add(slack_user)
        slack_user.github_email = github_email
        slack_user.last_interaction_at = now
        db.commit()
        db.refresh(slack_user)
        logger.info(f"Saved GitHub email for Slack user {workspace_slug}:{slack_user_id}")
        return slack_user

    @staticmethod
    def get_user_info(access_token: str, user_id: str) -> Optional[Dict[str, Any]]:
        """users.info, or None when Slack refuses"""
        url = f"{SlackService.SLACK_API_BASE}/users.info"
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            response = requests.get(url, headers=headers, params={"user": user_id})
            response_data = response.json()
        except Exception as e:
            logger.error(f"Exception while fetching Slack user {user_id}: {str(e)}")
            return None

        if not response_data.get("ok"):
            logger.error(f"users.info failed for {user_id}: {response_data.get('error', 'Unknown error')}")
            return None
        return response_data.get("user")

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    @staticmethod
    def send_slack_message(
        access_token: str,
        channel: str,
        text: str,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Send message to a Slack channel or DM (a user id as channel opens the DM)"""
        url = f"{SlackService.SLACK_API_BASE}/chat.postMessage"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json"
        }
        payload = {
            "channel": channel,
            "text": text,
        }
        if blocks:
            payload["blocks"] = blocks

        try:
            response = requests.post(url, headers=headers, json=payload)
            response_data = response.json()

            if response_data.get("ok"):
                logger.info(f"Successfully sent Slack message to channel: {channel}")
                return {"success": True, "data": response_data}
            else:
                logger.error(f"Failed to send Slack message: {response_data.get('error', 'Unknown error')}")
                return {"success": False, "error": response_data.get("error", "Unknown error")}

        except Exception as e:
            logger.error(f"Exception while sending Slack message: {str(e)}")
            return {"success": False, "error": str(e)}

    @staticmethod
    def build_pr_summary_blocks(pr_summary: str) -> List[Dict[str, Any]]:
        return [
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": "*🚀 New PR Summary*"},
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": pr_summary},
            },
            {"type": "divider"},
        ]

    @staticmethod
    def send_pr_summary(db: Session, workspace_slug: str, user_id: str, pr_summary: str) -> Dict[str, Any]:
        """DM a PR summary to a Slack user of the workspace"""
        installation = SlackService.get_installation_by_workspace(db, workspace_slug)
        if not installation:
            logger.warning(f"No Slack installation for workspace: {workspace_slug}")
            return {"success": False, "error": "slack_not_installed"}

        return SlackService.send_slack_message(
            access_token=installation.access_token,
            channel=user_id,
            text=pr_summary,
            blocks=SlackService.build_pr_summary_blocks(pr_summary),
        )

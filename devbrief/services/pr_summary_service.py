# =============================================================================
# devbrief/services/pr_summary_service.py
# =============================================================================
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session
from devbrief.core.exceptions import ConfigurationError
from devbrief.models.pr_summary import PRSummary
from devbrief.models.monitored_repo import MonitoredRepo
from devbrief.schemas.github import GitHubWebhookPayload
from devbrief.services.github_app_service import GitHubAppService
from devbrief.services.summary_service import SummaryService
from devbrief.services.slack_service import SlackService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "pr_summary_service.log")

class PRSummaryService:
    """
    Summarize a merged pull request and DM it to its author on Slack
    """

    @staticmethod
    def format_slack_message(pr_number: int, repo_name: str, summary: str) -> str:
        return f"🚀 *PR #{pr_number} merged in {repo_name}*\n\n{summary}"

    @staticmethod
    async def fetch_diff(installation_id: int, repo_full_name: str, pr_number: int) -> str:
        """Diff of the PR, or an empty string when GitHub can't provide one"""
        try:
            token = await GitHubAppService.get_installation_token(installation_id)
            return await GitHubAppService.fetch_pr_diff(token, repo_full_name, pr_number)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Could not fetch diff for {repo_full_name}#{pr_number}: {str(e)}")
            return ""

    @staticmethod
    def store_summary(db: Session, payload: GitHubWebhookPayload, summary: str) -> Optional[PRSummary]:
        pr = payload.pull_request
        record = PRSummary(
            repo=payload.repository.full_name,
            pr_number=pr.number,
            title=pr.title,
            merged_at=pr.merged_at,
            summary=summary,
            github_id=str(pr.user.id) if pr.user.id is not None else None,
            email=pr.user.email,
        )
        try:
            db.add(record)
            db.commit()
            db.refresh(record)
        except Exception as e:
            db.rollback()
            logger.error(f"Error storing PR summary for {record.repo}#{record.pr_number}: {str(e)}")
            return None
        logger.info(f"PR summary stored: {record.id}")
        return record

    @staticmethod
    async def process_merged_pr(
        db: Session,
        payload: GitHubWebhookPayload,
        installation_id: int,
        workspace_slug: str,
    ) -> Dict[str, Any]:
        pr = payload.pull_request
        repo = payload.repository

        logger.info(f"🔄 Processing merged PR {repo.full_name}#{pr.number} for workspace {workspace_slug}")
        logger.info(f"   Title: {pr.title}")
        logger.info(f"   Author: {pr.user.login} <{pr.user.email}>")

        diff = await PRSummaryService.fetch_diff(installation_id, repo.full_name, pr.number)
        summary = await SummaryService.generate_summary(pr, diff)

        PRSummaryService.store_summary(db, payload, summary)

        slack_user = SlackService.find_user_by_email(db, workspace_slug, pr.user.email)
        if not slack_user:
            logger.info(f"No Slack user found for GitHub email: {pr.user.email}")
            return {
                "message": "PR processed but no Slack user found",
                "summary": summary,
                "slack_user": None,
                "delivered": False,
            }

        message = PRSummaryService.format_slack_message(pr.number, repo.name, summary)
        result = SlackService.send_pr_summary(db, workspace_slug, slack_user.slack_user_id, message)
        if result.get("success"):
            logger.info(f"✅ PR summary sent to Slack user {slack_user.slack_user_id}")
        else:
            logger.error(f"❌ Failed to send Slack message: {result.get('error')}")

        return {
            "message": "PR processed successfully",
            "summary": summary,
            "slack_user": slack_user.slack_user_id,
            "delivered": bool(result.get("success")),
        }

    @staticmethod
    def list_workspace_summaries(db: Session, workspace_slug: str, limit: int = 50) -> List[PRSummary]:
        """Recent summaries for the repositories a workspace monitors"""
        repo_names = db.query(MonitoredRepo.repo_name).filter(
            MonitoredRepo.workspace_slug == workspace_slug,
            MonitoredRepo.is_monitored.is_(True),
        )
        return db.query(PRSummary).filter(
            PRSummary.repo.in_(repo_names.scalar_subquery())
        ).order_by(PRSummary.created_at.desc()).limit(limit).all()

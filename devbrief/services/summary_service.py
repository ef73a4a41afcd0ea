# =============================================================================
# devbrief/services/summary_service.py
# =============================================================================
from openai import AsyncOpenAI
from devbrief.core.config import settings
from devbrief.core.exceptions import ConfigurationError
from devbrief.schemas.github import GitHubPullRequest
from devbrief.services.github_app_service import GitHubAppService
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "summary_service.log")

EMPTY_COMPLETION = "Summary generation failed"

PROMPT_TEMPLATE = """You are an expert AI developer assistant. Given the following GitHub pull request, create a concise, Slack-friendly summary of the key changes.

### Pull Request Details:
- **Title**: {title}
- **Author**: {author}
- **Files Changed**: {changed_files}
- **Additions**: +{additions}
- **Deletions**: -{deletions}

### Pull Request Description:
{body}

### Code Changes:
```diff
{diff}
```

### Instructions:
Create a concise summary (2-3 sentences max) that highlights:
1. What was changed/added/fixed
2. The main impact or benefit
3. Keep it developer-friendly but accessible

Format the response as plain text, no markdown formatting."""

class SummaryService:
    """Turns a merged pull request and its diff into a short summary"""

    @staticmethod
    def build_prompt(pr: GitHubPullRequest, diff: str) -> str:
        return PROMPT_TEMPLATE.format(
            title=pr.title,
            author=pr.user.login,
            changed_files=pr.changed_files,
            additions=pr.additions,
            deletions=pr.deletions,
            body=pr.body or "No description provided",
            diff=GitHubAppService.truncate_diff(diff),
        )

    @staticmethod
    def fallback_summary(pr: GitHubPullRequest) -> str:
        return (
            f'PR #{pr.number} "{pr.title}" was merged by {pr.user.login}. '
            f"Changes: +{pr.additions} additions, -{pr.deletions} deletions across {pr.changed_files} files."
        )

    @staticmethod
    async def generate_summary(pr: GitHubPullRequest, diff: str) -> str:
        """One chat-completion attempt; any failure yields the templated fallback"""
        if not settings.OPENAI_API_KEY:
            raise ConfigurationError("OPENAI_API_KEY")

        prompt = SummaryService.build_prompt(pr, diff)
        try:
            client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
            response = await client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=settings.OPENAI_MAX_TOKENS,
                temperature=settings.OPENAI_TEMPERATURE,
            )
        except Exception as e:
            logger.error(f"OpenAI API error for PR #{pr.number}: {str(e)}")
            return SummaryService.fallback_summary(pr)

        content = response.choices[0].message.content if response.choices else None
        summary = (content or "").strip()
        if not summary:
            logger.warning(f"Empty completion for PR #{pr.number}")
            return EMPTY_COMPLETION

        logger.info(f"Generated summary for PR #{pr.number}: {summary[:100]}...")
        return summary

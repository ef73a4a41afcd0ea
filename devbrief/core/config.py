# =============================================================================
# devbrief/core/config.py
# =============================================================================
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "DevBrief API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Merged pull request summaries from GitHub, delivered as Slack DMs"
    API_V1_STR: str = "/api/v1"

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"

    # Public URLs
    APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:8000")
    FRONTEND_BASE_URL: str = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")

    # Dashboard authentication (HS256 tokens issued by the dashboard's auth provider)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key-here")
    ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = os.getenv("JWT_AUDIENCE")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

    # Bearer secret for the internal PR processing endpoint
    INTERNAL_API_KEY: Optional[str] = os.getenv("INTERNAL_API_KEY")

    # GitHub App
    GITHUB_APP_ID: Optional[str] = os.getenv("GITHUB_APP_ID")
    GITHUB_APP_SLUG: str = os.getenv("GITHUB_APP_SLUG", "devbrief")
    GITHUB_APP_PRIVATE_KEY: Optional[str] = os.getenv("GITHUB_APP_PRIVATE_KEY")
    GITHUB_WEBHOOK_SECRET: Optional[str] = os.getenv("GITHUB_WEBHOOK_SECRET")
    GITHUB_API_BASE: str = os.getenv("GITHUB_API_BASE", "https://api.github.com")

    # Slack App
    SLACK_CLIENT_ID: Optional[str] = os.getenv("SLACK_CLIENT_ID")
    SLACK_CLIENT_SECRET: Optional[str] = os.getenv("SLACK_CLIENT_SECRET")
    SLACK_SIGNING_SECRET: Optional[str] = os.getenv("SLACK_SIGNING_SECRET")
    SLACK_REDIRECT_URI: str = os.getenv("SLACK_REDIRECT_URI", "http://localhost:8000/api/v1/slack/callback")
    SLACK_SCOPES: str = os.getenv("SLACK_SCOPES", "chat:write,channels:read,users:read,users:read.email,im:history")
    SLACK_REQUEST_MAX_AGE_SECONDS: int = int(os.getenv("SLACK_REQUEST_MAX_AGE_SECONDS", "300"))  # 0 disables

    # OpenAI
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
    OPENAI_MAX_TOKENS: int = int(os.getenv("OPENAI_MAX_TOKENS", "200"))
    OPENAI_TEMPERATURE: float = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
    DIFF_MAX_CHARS: int = int(os.getenv("DIFF_MAX_CHARS", "8000"))

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./devbrief.db")
    DATABASE_POOL_SIZE: int = int(os.getenv("DATABASE_POOL_SIZE", "10"))
    DATABASE_MAX_OVERFLOW: int = int(os.getenv("DATABASE_MAX_OVERFLOW", "20"))

    # CORS
    ALLOWED_HOSTS: List[str] = ["*"]  # Configure for production

    # Logging
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    PORT: int = int(os.getenv("PORT", "8000"))

    @field_validator("DATABASE_URL")
    @classmethod
    def normalize_database_url(cls, v):
        # Hosted Postgres providers still hand out the legacy scheme
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("GITHUB_WEBHOOK_SECRET")
    @classmethod
    def validate_github_webhook_secret(cls, v):
        if not v:
            print("⚠️  WARNING: GITHUB_WEBHOOK_SECRET is not set")
        return v

    @field_validator("GITHUB_APP_PRIVATE_KEY")
    @classmethod
    def validate_github_private_key(cls, v):
        if not v:
            print("⚠️  WARNING: GITHUB_APP_PRIVATE_KEY is not set")
            return v
        # Keys pasted into a single-line env var keep their newlines escaped
        return v.replace("\\n", "\n")

    @field_validator("SLACK_SIGNING_SECRET")
    @classmethod
    def validate_slack_signing_secret(cls, v):
        if not v:
            print("⚠️  WARNING: SLACK_SIGNING_SECRET is not set")
        return v

    @field_validator("SLACK_CLIENT_ID", "SLACK_CLIENT_SECRET")
    @classmethod
    def validate_slack_oauth(cls, v, info):
        if not v:
            print(f"⚠️  WARNING: {info.field_name} is not set")
        return v

    @field_validator("OPENAI_API_KEY")
    @classmethod
    def validate_openai_api_key(cls, v):
        if not v:
            print("⚠️  WARNING: OPENAI_API_KEY is not set")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()

# =============================================================================
# devbrief/db/init_db.py
# =============================================================================
from devbrief.db.base import Base
from devbrief.db.session import engine
from devbrief.models import (  # noqa: F401  (register tables on Base.metadata)
    github_installation,
    monitored_repo,
    pr_summary,
    slack_installation,
    slack_user,
    workspace,
)

def init_db():
    """Initialize database tables"""
    Base.metadata.create_all(bind=engine)

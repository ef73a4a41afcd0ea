# =============================================================================
# devbrief/main.py
# =============================================================================
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from sqlalchemy import text
from devbrief.core.config import settings
from devbrief.core.exceptions import DevBriefError
from devbrief.api.v1.api import api_router
from devbrief.db.init_db import init_db
from devbrief.db.session import SessionLocal
from devbrief.core.logger import get_module_logger

logger = get_module_logger(__name__, "main.log")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create tables on startup and log which integrations are configured
    """
    logger.info("🚀 Starting DevBrief API...")

    try:
        logger.info("📦 Initializing database...")
        init_db()
        logger.info("✅ Database initialized successfully")

        logger.info("🔧 Application configuration:")
        logger.info(f"   Environment: {settings.ENVIRONMENT}")
        logger.info(f"   Debug mode: {settings.DEBUG}")
        logger.info(f"   Project: {settings.PROJECT_NAME} v{settings.VERSION}")
        logger.info(f"   Database: {settings.DATABASE_URL[:50]}...")
        logger.info(f"   GitHub App: {'✅ Configured' if settings.GITHUB_APP_ID and settings.GITHUB_APP_PRIVATE_KEY else '❌ Not configured'}")
        logger.info(f"   GitHub webhooks: {'✅ Configured' if settings.GITHUB_WEBHOOK_SECRET else '❌ Not configured'}")
        logger.info(f"   Slack OAuth: {'✅ Configured' if settings.SLACK_CLIENT_ID else '❌ Not configured'}")
        logger.info(f"   Slack events: {'✅ Configured' if settings.SLACK_SIGNING_SECRET else '❌ Not configured'}")
        logger.info(f"   OpenAI: {'✅ Configured' if settings.OPENAI_API_KEY else '❌ Not configured'}")
    except Exception as e:
        logger.error(f"❌ Error during startup: {str(e)}")
        raise

    yield

    logger.info("👋 Application shutdown completed")

def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application with middleware and routes
    """
    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.debug = settings.DEBUG

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router, prefix=settings.API_V1_STR)

    @application.exception_handler(DevBriefError)
    async def devbrief_error_handler(request: Request, exc: DevBriefError):
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    return application

app = create_application()

@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "description": settings.DESCRIPTION,
        "environment": settings.ENVIRONMENT,
        "docs": "/docs",
        "api_endpoints": {
            "workspaces": f"{settings.API_V1_STR}/workspaces",
            "github": f"{settings.API_V1_STR}/github/",
            "slack": f"{settings.API_V1_STR}/slack/",
        },
    }

@app.get("/health")
async def health_check():
    """
    Health check including a database round trip
    """
    db_healthy = True
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check database query failed: {str(e)}")
        db_healthy = False
    finally:
        db.close()

    return {
        "status": "healthy" if db_healthy else "degraded",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "database": "healthy" if db_healthy else "unhealthy",
            "api": "healthy",
        },
        "configuration": {
            "github_app": bool(settings.GITHUB_APP_ID and settings.GITHUB_APP_PRIVATE_KEY),
            "github_webhooks": bool(settings.GITHUB_WEBHOOK_SECRET),
            "slack_oauth": bool(settings.SLACK_CLIENT_ID),
            "slack_events": bool(settings.SLACK_SIGNING_SECRET),
            "openai": bool(settings.OPENAI_API_KEY),
        },
    }

if __name__ == "__main__":
    import uvicorn

    # Development server
    uvicorn.run(
        "devbrief.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )

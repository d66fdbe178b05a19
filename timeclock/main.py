"""Timeclock — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from timeclock.attendance.router import router as attendance_router
from timeclock.common.exceptions import register_exception_handlers
from timeclock.common.rate_limit import limiter
from timeclock.config import settings
from timeclock.database import engine
from timeclock.logging_config import configure_logging
from timeclock.members.router import router as members_router
from timeclock.reports.router import member_reports_router
from timeclock.reports.router import router as reports_router

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("Timeclock %s starting (%s)", VERSION, settings.ENVIRONMENT)
    yield
    await engine.dispose()
    logger.info("Timeclock stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Timeclock",
        description="Member attendance tracking with monthly and yearly summaries",
        version=VERSION,
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(members_router, prefix="/api/v1/members", tags=["members"])
    app.include_router(member_reports_router, prefix="/api/v1/members", tags=["reports"])
    app.include_router(reports_router, prefix="/api/v1/reports", tags=["reports"])
    app.include_router(attendance_router, prefix="/api/v1", tags=["attendance"])

    return app


app = create_app()

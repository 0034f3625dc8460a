"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (logging,
login lockout window, optional schema creation, DB engine dispose).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.core.limiter import login_attempts
from app.infrastructure.persistence import database
from app.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, failed-login window, tables (only with
    DATABASE_AUTO_CREATE). Shutdown: SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    login_attempts.configure(
        max_attempts=settings.login_max_failed_attempts,
        window_seconds=settings.login_lockout_seconds,
    )
    if settings.database_auto_create:
        await database.create_all()
        logger.info("Database tables ensured (DATABASE_AUTO_CREATE)")
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    await database.dispose_engine()
    logger.info("Database engine disposed")

"""Application lifespan: startup and shutdown.

No business logic here, only wiring of process-wide infrastructure: the
background task runner for outbound email and the SQL engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from medboard.core.config import get_settings
from medboard.infrastructure.persistence.database import dispose_engine
from medboard.infrastructure.services.email_dispatcher import build_email_dispatcher
from medboard.infrastructure.services.security_event_sink import LoggingSecurityEventSink
from medboard.shared.utils.background import BackgroundTaskRunner

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create shared services on startup; drain background tasks and dispose the engine on exit."""
    settings = get_settings()

    # ---- Startup ----
    app.state.background = BackgroundTaskRunner(settings.email_dispatch_timeout_seconds)
    app.state.email_dispatcher = build_email_dispatcher(settings)
    app.state.security_event_sink = LoggingSecurityEventSink()
    logger.info(
        "%s %s started (email: %s)",
        settings.app_name,
        settings.app_version,
        "smtp" if settings.smtp_host else "log-only",
    )

    yield

    # ---- Shutdown ----
    background: BackgroundTaskRunner = app.state.background
    if background.pending:
        logger.info("Waiting for %d background task(s)", background.pending)
        await background.wait_idle()
    await dispose_engine()
    logger.info("SQL engine disposed")

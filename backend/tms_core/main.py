"""TMS Core API — FastAPI application entry point for the enhanced connectivity layer.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Global error handlers map CoreError → {ok: false, error} JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan
    - app.state.session_verifier is installed by the host dashboard, not here

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - No background scheduler: heartbeats only happen when /heartbeat-trigger is called
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tms_core.api.error_handlers import register_error_handlers
from tms_core.api.routes import enhanced, health, heartbeat_trigger
import tms_core.infrastructure.database as database
from tms_core.infrastructure.observability import setup_logging
from tms_core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if not settings.enhanced_service_url:
        logger.info("Enhanced service not configured")
    logger.info("TMS Core API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("TMS Core API shutting down")


app = FastAPI(
    title="TMS Core API", version="1.0.0", lifespan=lifespan,
)
app.state.session_verifier = None

# CORS from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration (ExMA: no convention-over-config)
app.include_router(health.router)
app.include_router(heartbeat_trigger.router)
app.include_router(enhanced.router)

register_error_handlers(app)

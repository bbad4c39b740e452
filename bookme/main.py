# bookme/main.py
"""
BookMe booking API application.

``create_app`` builds a fully wired FastAPI instance; the module-level
``app`` is what ``uvicorn bookme.main:app`` serves.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Response

from .core.config import Settings, settings as default_settings
from .core.constants import API_DESCRIPTION, BRAND_NAME
from .core.request_context import attach_request_id_filter
from .database import Database
from .errors import register_error_handlers
from .middleware.timing import TimingMiddleware
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes import bookings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    attach_request_id_filter()


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database on startup and dispose it on shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"{BRAND_NAME} API starting up (environment: {settings.environment})")

    owns_database = app.state.database is None
    if owns_database:
        app.state.database = Database(settings)
        if settings.is_sqlite:
            # Local development convenience; deployed databases are migrated with Alembic
            app.state.database.create_all()

    try:
        yield
    finally:
        if owns_database:
            app.state.database.dispose()
            app.state.database = None
        logger.info(f"{BRAND_NAME} API shut down")


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use, defaults to the process settings
        database: Pre-built database handle (tests); when omitted the
            lifespan creates one from ``settings`` and disposes it on exit
    """
    cfg = settings or default_settings
    configure_logging(cfg.log_level)

    app = FastAPI(
        title=cfg.api_title,
        description=API_DESCRIPTION,
        version=cfg.api_version,
        lifespan=app_lifespan,
    )
    app.state.settings = cfg
    app.state.database = database

    register_error_handlers(app)
    app.add_middleware(TimingMiddleware, slow_request_threshold_ms=cfg.slow_request_threshold_ms)
    app.include_router(bookings.router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(
            content=prometheus_metrics.get_metrics(),
            media_type=prometheus_metrics.get_content_type(),
        )

    return app


app = create_app()

"""endware Reference API: FastAPI application and single composition root.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - EndwareConfig built once here from Settings and injected into every router
    - Logging configured on startup via the lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - No FastAPI exception handlers: endware handlers contain their own faults and
      never let an exception reach the framework
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from endware import __version__
from endware.api.routes import health, widgets
from endware.config import Settings, get_settings
from endware.core.context import EndwareConfig
from endware.infrastructure.observability import log_internal_error, setup_logging

logger = logging.getLogger(__name__)


def build_config(settings: Settings) -> EndwareConfig:
    if settings.log_internal_errors:
        return EndwareConfig(log_error=log_internal_error)
    return EndwareConfig()


def create_app(config: EndwareConfig | None = None) -> FastAPI:
    settings = get_settings()
    config = config or build_config(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info("endware API started")
        yield
        logger.info("endware API shutting down")

    app = FastAPI(title="endware API", version=__version__, lifespan=lifespan)
    app.include_router(health.build_router(config))
    app.include_router(widgets.build_router(config))
    return app


app = create_app()

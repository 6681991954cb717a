"""
Main entrypoint for the Amachou API.

This module assembles the FastAPI application, sets up logging,
registers the exception handlers and includes the API router under
``settings.api_prefix``.  ``create_app`` builds and configures the
app, which is then instantiated at module import time as ``app``::

    uvicorn amachou_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router as api_router
from .core.config import settings
from .core.db import init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Pagination and alert headers must be readable by browser clients.
EXPOSED_HEADERS = [
    "Location",
    "Link",
    "X-Total-Count",
    f"X-{settings.application_name}-alert",
    f"X-{settings.application_name}-error",
    f"X-{settings.application_name}-params",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Apply migrations before serving requests."""
    init_db()
    logger.info("%s %s started", settings.project_name, settings.api_version)
    yield
    logger.info("%s shutting down", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    if settings.cors_origin_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=EXPOSED_HEADERS,
        )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["system"])
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()

"""FastAPI application factory.

Lifespan
--------
On startup the app builds the readings service (shared across all requests
via ``request.app.state.service``).  On shutdown it closes the pooled remote
browser connection, if rendered mode ever opened one.

Routers
-------
    /api/lecturas  — daily readings
    /api/health    — liveness
    /api/help      — usage document
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lecturas import __version__
from lecturas.config import settings
from lecturas.scraper.browser_pool import close_browser_pool
from lecturas.service import get_readings_service

from lecturas.api.routers import readings as readings_router

logger = logging.getLogger("lecturas.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Attach the service on startup and release the browser pool on shutdown."""
    app.state.service = get_readings_service()
    logger.info("Readings API ready (fetch mode: %s)", settings.fetch_mode)
    try:
        yield
    finally:
        await close_browser_pool()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="API Evangelio del Día",
        description="Extrae las lecturas del día desde Vatican News.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(readings_router.router, prefix="/api", tags=["lecturas"])

    return app


logging.basicConfig(level=settings.log_level)

# Module-level instance used by uvicorn:
#   uvicorn lecturas.api.app:app --reload
app = create_app()

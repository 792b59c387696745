"""FastAPI application for the metadir metadata service.

Provides REST API endpoints wrapping the metadir package for:
- Publishing application metadata as YAML or JSON
- Querying metadata by source, or by company and title
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from metadir import __version__
from metadir.config import Settings
from metadir.directory.memory_directory import MetadataDirectory
from metadir.utils.logging import configure_logging
from web.backend.app.routers import metadata

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    directory: Optional[MetadataDirectory] = None,
) -> FastAPI:
    """Build the application around its own metadata directory."""
    if settings is None:
        settings = Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="metadir API",
        description=(
            "REST API for the metadir application metadata directory. "
            "Provides endpoints for publishing and querying metadata."
        ),
        version=__version__,
    )
    app.state.settings = settings
    app.state.directory = directory if directory is not None else MetadataDirectory()

    # -----------------------------------------------------------------------
    # CORS middleware (allow all origins for development)
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(metadata.router)

    # -----------------------------------------------------------------------
    # Root and health-check endpoints
    # -----------------------------------------------------------------------

    @app.get("/", tags=["meta"])
    async def root():
        """Return basic API information."""
        return {
            "name": "metadir API",
            "version": __version__,
            "description": "Application metadata directory REST API",
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    logger.info("metadir API %s ready", __version__)
    return app


# Application instance for uvicorn
app = create_app()

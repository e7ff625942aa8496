"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docsearch import __version__
from docsearch.api.deps import set_coordinator
from docsearch.api.v1.router import router as v1_router
from docsearch.backends.base.backend import StorageBackend
from docsearch.config.settings import Settings
from docsearch.core.coordinator import SearchCoordinator
from docsearch.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, backend: StorageBackend | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        backend: Storage backend to serve from.  If None, the backend is
            selected from settings at startup.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # Auto-detect docsearch-config.yaml if present
        yaml_path = Path("docsearch-config.yaml")
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    setup_logging(settings.observability)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting docsearch v%s", __version__)

        coordinator = SearchCoordinator(settings, backend=backend)
        await coordinator.initialize()
        set_coordinator(coordinator)

        app.state.settings = settings
        app.state.coordinator = coordinator

        logger.info("docsearch is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down docsearch...")
        await coordinator.shutdown()
        set_coordinator(None)
        logger.info("docsearch shutdown complete")

    app = FastAPI(
        title="docsearch",
        description="Filtered, ranked, paginated document search over OpenSearch or an in-memory corpus.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app

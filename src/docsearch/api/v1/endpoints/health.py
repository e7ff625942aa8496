"""Health check endpoints — Service and storage backend health."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from docsearch import __version__
from docsearch.api.deps import get_coordinator
from docsearch.backends.base.backend import BackendHealth
from docsearch.core.coordinator import SearchCoordinator

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="docsearch server version")
    service: str = Field(description="Service name ('docsearch')")
    backend: str = Field(description="Name of the storage backend selected at startup")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="System Health Check",
    description="Returns overall service health, version, and the active storage backend.",
)
async def health_check(
    coordinator: SearchCoordinator = Depends(get_coordinator),
) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="docsearch",
        backend=coordinator.backend.name,
    )


@router.get(
    "/health/backend",
    response_model=BackendHealth,
    summary="Storage Backend Health Check",
    description="Run a health check against the active storage backend.",
)
async def backend_health(
    coordinator: SearchCoordinator = Depends(get_coordinator),
) -> BackendHealth:
    """Check health of the active storage backend."""
    return await coordinator.health_check()

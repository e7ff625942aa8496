"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from docsearch.core.coordinator import SearchCoordinator

# Global coordinator instance (set during application lifespan)
_coordinator: SearchCoordinator | None = None


def set_coordinator(coordinator: SearchCoordinator | None) -> None:
    """Set the global coordinator instance (called during app lifespan)."""
    global _coordinator
    _coordinator = coordinator


def get_coordinator() -> SearchCoordinator:
    """Get the global search coordinator.

    Raises:
        RuntimeError: If the coordinator is not initialized.
    """
    if _coordinator is None:
        raise RuntimeError("Search coordinator not initialized. Is the server running?")
    return _coordinator

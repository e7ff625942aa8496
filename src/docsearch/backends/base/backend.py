"""Base storage backend — Abstract interface for all corpus stores.

A backend is responsible for:
  1. Evaluating a ``FilterPredicate`` against its corpus
  2. Ordering the matches with a ``RankingStrategy``
  3. Reporting the exact number of matches before pagination
  4. Reporting health status

Pagination is the coordinator's job.  A backend may stop ordering after the
first ``limit`` matches as an optimization, but ``total`` must stay exact.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from docsearch.core.filters import FilterPredicate
from docsearch.core.ranking import RankedDocument, RankingStrategy


class BackendHealth(BaseModel):
    """Health status of a storage backend."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class BackendResult(BaseModel):
    """Ordered matches and the exact match count."""

    matches: list[RankedDocument] = Field(default_factory=list, description="Matches in ranked order")
    total: int = Field(default=0, ge=0, description="Number of predicate matches before pagination")


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    All backends must implement:
      - search(): Filter, rank, and count matching documents
      - health_check(): Report backend health status

    Backends are read-only at query time and safe to call concurrently.
    Connections are set up in ``initialize()`` and released in ``shutdown()``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique backend name (e.g., 'opensearch', 'memory')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (connections, pools, etc.).

        Called once during application startup.

        Raises:
            BackendUnavailableError: If the underlying store cannot be reached.
        """

    @abstractmethod
    async def shutdown(self) -> None:
        """Release resources held by the backend."""

    @abstractmethod
    async def search(
        self,
        predicate: FilterPredicate,
        ranking: RankingStrategy,
        limit: int | None = None,
    ) -> BackendResult:
        """Find, order, and count documents matching ``predicate``.

        Args:
            predicate: Filter criteria.
            ranking: Ordering to apply to the matches.
            limit: Number of leading matches the caller needs.  ``None``
                requests every match.

        Returns:
            At least the first ``limit`` ranked matches and the exact total.

        Raises:
            BackendError: If the store cannot answer the query.
        """

    @abstractmethod
    async def health_check(self) -> BackendHealth:
        """Check the health of the backend."""

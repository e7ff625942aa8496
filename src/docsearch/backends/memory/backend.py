"""In-memory backend — Reference implementation over a fixed corpus.

Used when the durable store is not reachable at startup.  Filtering and
ranking are evaluated in-process exactly as defined by ``FilterPredicate``
and ``RankingStrategy``; there is no native engine to defer to, which makes
this backend the yardstick for the OpenSearch backend's behavior.

Usage::

    backend = InMemoryBackend(SAMPLE_DOCUMENTS)
    await backend.initialize()
    result = await backend.search(predicate, ranking, limit=20)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from docsearch.backends.base.backend import BackendHealth, BackendResult, StorageBackend
from docsearch.core.filters import FilterPredicate
from docsearch.core.ranking import RankingStrategy
from docsearch.models.document import DocumentRecord

logger = logging.getLogger(__name__)


class InMemoryBackend(StorageBackend):
    """Storage backend over an injected, immutable document corpus.

    The corpus is copied into a tuple at construction and never mutated, so
    concurrent queries need no locking.

    Args:
        documents: The corpus to serve.
    """

    def __init__(self, documents: Iterable[DocumentRecord]) -> None:
        self._documents: tuple[DocumentRecord, ...] = tuple(documents)

    @property
    def name(self) -> str:
        return "memory"

    @property
    def documents(self) -> tuple[DocumentRecord, ...]:
        return self._documents

    async def initialize(self) -> None:
        logger.info("In-memory backend ready with %d documents", len(self._documents))

    async def shutdown(self) -> None:
        """Nothing to release."""

    async def search(
        self,
        predicate: FilterPredicate,
        ranking: RankingStrategy,
        limit: int | None = None,
    ) -> BackendResult:
        """Filter and rank the corpus in-process.

        The whole match list is ranked; ``limit`` only trims the returned
        list.
        """
        matching = [doc for doc in self._documents if predicate.matches(doc)]
        ranked = ranking.rank(matching)
        if limit is not None:
            ranked = ranked[:limit]
        return BackendResult(matches=ranked, total=len(matching))

    async def health_check(self) -> BackendHealth:
        return BackendHealth(
            status="healthy",
            last_check=datetime.now(UTC).isoformat(),
            message=f"In-memory corpus: {len(self._documents)} documents",
        )

"""Search coordinator — Orchestrates a search request end to end.

Pipeline:
  Raw params → [QueryDescriptor] → [FilterPredicate] + [RankingStrategy]
             → [StorageBackend] → ranked matches + total
             → [paginate] → SearchResponse

The coordinator owns backend selection, which happens exactly once in
``initialize()``: the OpenSearch store when it is configured and reachable,
the in-memory fallback corpus otherwise.  It performs no filtering or
ranking itself.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING

from docsearch.backends.base.backend import BackendHealth, StorageBackend
from docsearch.backends.base.exceptions import BackendError
from docsearch.backends.memory.backend import InMemoryBackend
from docsearch.backends.memory.corpus import SAMPLE_DOCUMENTS, load_corpus
from docsearch.backends.opensearch.backend import OpenSearchBackend
from docsearch.core.filters import FilterPredicate
from docsearch.core.ranking import RankedDocument, build_ranking
from docsearch.models.document import DocumentSummary
from docsearch.models.query import QueryDescriptor
from docsearch.models.response import SearchResponse

if TYPE_CHECKING:
    from docsearch.config.settings import Settings

logger = logging.getLogger(__name__)


async def select_backend(settings: Settings) -> StorageBackend:
    """Pick and initialize the storage backend for this process.

    The OpenSearch store is used when hosts are configured and the cluster
    answers; any failure to reach it falls back to the in-memory corpus.
    """
    store = settings.store
    if store.hosts:
        backend = OpenSearchBackend(
            hosts=store.hosts,
            index=store.index,
            username=store.username,
            password=store.password,
            verify_certs=store.verify_certs,
            timeout=store.timeout,
            **store.extra,
        )
        try:
            await backend.initialize()
            return backend
        except BackendError:
            logger.warning(
                "Could not reach OpenSearch at %s. Falling back to in-memory corpus.",
                store.hosts,
                exc_info=True,
            )
    else:
        logger.warning("No OpenSearch hosts configured. Running on in-memory corpus.")

    corpus_path = settings.fallback.corpus_path
    documents = load_corpus(corpus_path) if corpus_path else SAMPLE_DOCUMENTS
    fallback = InMemoryBackend(documents)
    await fallback.initialize()
    return fallback


def paginate(matches: list[RankedDocument], total: int, descriptor: QueryDescriptor) -> SearchResponse:
    """Slice one page out of the ranked matches and shape the response.

    ``matches`` must start at the first ranked match; it may be truncated
    anywhere at or after ``offset + limit``.
    """
    start = descriptor.offset
    page = matches[start : start + descriptor.limit]
    return SearchResponse(
        items=[DocumentSummary.from_record(m.record, m.score) for m in page],
        total=total,
        page=descriptor.page,
        pages=math.ceil(total / descriptor.limit),
    )


class SearchCoordinator:
    """Entry point for search requests.

    Attributes:
        settings: Application configuration.
        backend: The storage backend selected at startup.
    """

    def __init__(self, settings: Settings, backend: StorageBackend | None = None) -> None:
        self.settings = settings
        self._backend = backend

    @property
    def backend(self) -> StorageBackend:
        if self._backend is None:
            raise RuntimeError("Search coordinator not initialized. Call initialize() first.")
        return self._backend

    async def initialize(self) -> None:
        """Select the storage backend (once) unless one was injected."""
        if self._backend is None:
            self._backend = await select_backend(self.settings)
        else:
            await self._backend.initialize()
        logger.info("Search coordinator initialized with '%s' backend", self._backend.name)

    async def shutdown(self) -> None:
        if self._backend is not None:
            await self._backend.shutdown()
            logger.info("Search coordinator shut down")

    async def search(self, params: Mapping[str, str | None]) -> SearchResponse:
        """Run a search request.

        Args:
            params: Raw, string-typed request parameters.

        Returns:
            The requested page of results.

        Raises:
            BackendError: If the storage backend cannot answer.  No partial
                result is ever returned.
        """
        start_time = time.monotonic()
        descriptor = QueryDescriptor.from_params(params)
        predicate = FilterPredicate.from_descriptor(descriptor)
        ranking = build_ranking(descriptor)

        result = await self.backend.search(predicate, ranking, limit=descriptor.offset + descriptor.limit)
        response = paginate(result.matches, result.total, descriptor)

        logger.info(
            "Search q=%r sort=%s/%s page=%d: %d of %d matches in %d ms",
            descriptor.q,
            descriptor.sort_field.value,
            descriptor.sort_order.value,
            descriptor.page,
            len(response.items),
            response.total,
            int((time.monotonic() - start_time) * 1000),
        )
        return response

    async def health_check(self) -> BackendHealth:
        return await self.backend.health_check()

"""OpenSearch backend — Durable, indexed document store (OpenSearch v2+).

This backend uses ``opensearch-py`` (async) and delegates filtering,
free-text scoring, and sorting to the store.  The expected index layout::

    title        text    (with a keyword sub-field)
    slug         keyword
    type         keyword
    tags         keyword
    author       keyword (searchable as text through multi_match)
    contentText  text
    updatedAt    date

The free-text term is scored natively with a ``most_fields`` multi-match
boosted title^8, tags^4, author^2, contentText^1, which keeps the field
weight ordering of the in-memory backend.

``opensearch-py`` is a required dependency.  It is imported on
``initialize()`` so that a broken install surfaces as ``ConfigurationError``
and the service falls back to the in-memory corpus.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from docsearch.backends.base.backend import BackendHealth, BackendResult, StorageBackend
from docsearch.backends.base.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    QueryError,
)
from docsearch.core.filters import FilterPredicate
from docsearch.core.ranking import RankedDocument, RankingStrategy
from docsearch.models.document import DocumentRecord

logger = logging.getLogger(__name__)

# OpenSearch's default ``index.max_result_window``.
DEFAULT_MAX_RESULT_WINDOW = 10_000

_SOURCE_FIELDS = ["title", "slug", "type", "tags", "author", "contentText", "updatedAt"]


class OpenSearchBackend(StorageBackend):
    """Storage backend for an OpenSearch index.

    Args:
        hosts: List of OpenSearch node URLs.
        index: Index (or alias) holding the documents.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        timeout: Per-request timeout in seconds.
        max_result_window: Largest ``from + size`` the index accepts.
        **kwargs: Additional keyword arguments forwarded to ``AsyncOpenSearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        index: str = "documents",
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        timeout: float = 10.0,
        max_result_window: int = DEFAULT_MAX_RESULT_WINDOW,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["https://localhost:9200"]
        self._index = index
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._timeout = timeout
        self._max_result_window = max_result_window
        self._extra_kwargs = kwargs
        self._client: Any = None

    @property
    def name(self) -> str:
        return "opensearch"

    async def initialize(self) -> None:
        """Create the ``AsyncOpenSearch`` client and verify the cluster is reachable."""
        try:
            from opensearchpy import AsyncOpenSearch
        except ImportError as e:
            raise ConfigurationError(
                "opensearch-py package is required.  Install with: pip install opensearch-py"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
            "timeout": self._timeout,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)

        try:
            client = AsyncOpenSearch(**client_kwargs)
        except Exception as e:
            raise ConfigurationError(f"Invalid OpenSearch client options: {e}") from e

        try:
            info = await client.info()
        except Exception as e:
            await client.close()
            raise BackendUnavailableError(f"Failed to connect to OpenSearch: {e}") from e

        self._client = client
        version = info.get("version", {}).get("number", "unknown")
        cluster = info.get("cluster_name", "unknown")
        logger.info("Connected to OpenSearch cluster: %s (v%s), index: %s", cluster, version, self._index)

    async def shutdown(self) -> None:
        """Close the OpenSearch client."""
        if self._client:
            await self._client.close()
            self._client = None

    # ── Search ───────────────────────────────────────────────────────────

    def build_body(
        self,
        predicate: FilterPredicate,
        ranking: RankingStrategy,
        limit: int | None,
        search_after: list[Any] | None = None,
    ) -> dict[str, Any]:
        """Translate a predicate and ranking into an OpenSearch search body.

        ``size`` never exceeds the index result window; ``search_after``
        continues from the sort values of the previous batch's last hit.
        """
        size = self._max_result_window if limit is None else min(limit, self._max_result_window)
        body: dict[str, Any] = {
            "query": predicate.to_opensearch_query(),
            "sort": ranking.to_opensearch_sort(),
            "from": 0,
            "size": size,
            "track_total_hits": True,
            "_source": _SOURCE_FIELDS,
        }
        if search_after is not None:
            body["search_after"] = search_after
        return body

    async def search(
        self,
        predicate: FilterPredicate,
        ranking: RankingStrategy,
        limit: int | None = None,
    ) -> BackendResult:
        """Execute the query against OpenSearch.

        Requests larger than the result window are fetched in batches with
        ``search_after``.  Every sort ends on ``slug``, so batches never
        overlap or skip documents.
        """
        if not self._client:
            raise BackendUnavailableError("OpenSearch client not initialized.")

        start = time.monotonic()
        matches: list[RankedDocument] = []
        total = 0
        cursor: list[Any] | None = None
        batches = 0
        while True:
            remaining = None if limit is None else limit - len(matches)
            body = self.build_body(predicate, ranking, remaining, search_after=cursor)
            try:
                response = await self._client.search(index=self._index, body=body)
            except Exception as e:
                raise QueryError(f"OpenSearch query failed: {e}") from e
            batches += 1

            hits = response.get("hits", {})
            page = hits.get("hits", [])
            if cursor is None:
                total = hits.get("total", {}).get("value", 0)
            matches.extend(self.map_hit(hit, with_score=ranking.includes_score) for hit in page)

            if len(page) < body["size"] or (limit is not None and len(matches) >= limit):
                break
            cursor = page[-1].get("sort")
            if cursor is None:
                raise QueryError("OpenSearch hit is missing sort values; cannot page past the result window")

        took_ms = int((time.monotonic() - start) * 1000)
        logger.debug(
            "OpenSearch returned %d of %d matches in %d batch(es), %d ms", len(matches), total, batches, took_ms
        )
        return BackendResult(matches=matches, total=total)

    # ── Schema mapping ───────────────────────────────────────────────────

    @staticmethod
    def map_hit(hit: dict[str, Any], with_score: bool = False) -> RankedDocument:
        """Map an OpenSearch hit to a ``RankedDocument``.

        Raises:
            QueryError: If the stored document does not fit the record schema.
        """
        source = dict(hit.get("_source", {}))
        source["id"] = str(hit.get("_id", ""))
        try:
            record = DocumentRecord.model_validate(source)
        except ValidationError as e:
            raise QueryError(f"Malformed document '{source['id']}' in index: {e}") from e

        score = None
        if with_score:
            score = float(hit.get("_score") or 0.0)
        return RankedDocument(record=record, score=score)

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> BackendHealth:
        """Check OpenSearch cluster health."""
        if not self._client:
            return BackendHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = await self._client.cluster.health()
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return BackendHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Index: {self._index}",
            )
        except Exception as e:
            return BackendHealth(status="unhealthy", message=str(e))

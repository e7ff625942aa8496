"""docsearch Python SDK — Async and sync clients for the docsearch REST API.

Usage::

    # Async
    async with AsyncDocSearchClient("http://localhost:3000") as client:
        page = await client.search("export", types=["pdf"], sort="date")

    # Sync (wraps async client internally)
    client = DocSearchClient("http://localhost:3000")
    page = client.search("export")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any, cast

import httpx

logger = logging.getLogger(__name__)

SearchResult = dict[str, Any]
"""Search response dict (mirrors ``SearchResponse`` JSON)."""


def build_search_params(
    q: str = "",
    *,
    types: Iterable[str] | None = None,
    tags: Iterable[str] | None = None,
    author: str | None = None,
    updated_from: datetime | str | None = None,
    updated_to: datetime | str | None = None,
    sort: str | None = None,
    order: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> dict[str, str]:
    """Encode search arguments as the string query parameters of ``GET /v1/search``.

    Unset arguments are omitted so the server applies its defaults.
    """
    params: dict[str, str] = {}
    if q:
        params["q"] = q
    if types:
        params["types"] = ",".join(types)
    if tags:
        params["tags"] = ",".join(tags)
    if author:
        params["author"] = author
    for key, bound in (("from", updated_from), ("to", updated_to)):
        if bound is not None:
            params[key] = bound.isoformat() if isinstance(bound, datetime) else bound
    if sort:
        params["sort"] = sort
    if order:
        params["order"] = order
    if page is not None:
        params["page"] = str(page)
    if limit is not None:
        params["limit"] = str(limit)
    return params


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncDocSearchClient:
    """Async Python client for the docsearch API.

    Args:
        base_url: docsearch server URL, e.g. ``"http://localhost:3000"``.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncDocSearchClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ── Health ──

    async def health(self) -> dict[str, Any]:
        """Check server health."""
        resp = await self._client.get("/v1/health")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def backend_health(self) -> dict[str, Any]:
        """Check the health of the server's storage backend."""
        resp = await self._client.get("/v1/health/backend")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── Search ──

    async def search(self, q: str = "", **filters: Any) -> SearchResult:
        """Search documents.

        Args:
            q: Free-text term.
            **filters: Keyword arguments of :func:`build_search_params`
                (``types``, ``tags``, ``author``, ``updated_from``,
                ``updated_to``, ``sort``, ``order``, ``page``, ``limit``).

        Returns:
            Response dict with ``items``, ``total``, ``page``, and ``pages``.

        Raises:
            httpx.HTTPStatusError: If the server reports a backend failure.
        """
        params = build_search_params(q, **filters)
        logger.debug("GET %s/v1/search %s", self.base_url, params)
        resp = await self._client.get("/v1/search", params=params)
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client (wraps AsyncDocSearchClient)
# ═══════════════════════════════════════════════════════════════════════════════


class DocSearchClient:
    """Synchronous Python client for the docsearch API.

    Each call opens a short-lived :class:`AsyncDocSearchClient` and drives
    it to completion, so instances hold no connection between calls.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._httpx_kwargs = httpx_kwargs

    def _call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke ``method`` on a fresh async client and wait for the result."""

        async def _invoke() -> Any:
            async with AsyncDocSearchClient(self._base_url, timeout=self._timeout, **self._httpx_kwargs) as c:
                return await getattr(c, method)(*args, **kwargs)

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(_invoke())

        # Called from inside a running loop (e.g. Jupyter): use a private loop in a worker thread.
        import concurrent.futures

        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, _invoke()).result()

    def health(self) -> dict[str, Any]:
        """Check server health."""
        return cast(dict[str, Any], self._call("health"))

    def backend_health(self) -> dict[str, Any]:
        """Check storage backend health."""
        return cast(dict[str, Any], self._call("backend_health"))

    def search(self, q: str = "", **filters: Any) -> SearchResult:
        """Search documents.  Accepts the same arguments as :meth:`AsyncDocSearchClient.search`."""
        return cast(SearchResult, self._call("search", q, **filters))

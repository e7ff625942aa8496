"""Search endpoint — Filtered, ranked, paginated document retrieval.

Every parameter is an optional string.  Malformed values are normalized
(clamped pagination, dropped dates, default sort) rather than rejected, so
this endpoint never answers 4xx for bad input.  Only a backend failure
produces an error response (500).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from docsearch.api.deps import get_coordinator
from docsearch.core.coordinator import SearchCoordinator
from docsearch.models.response import SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    summary="Search Documents",
    description=(
        "Search the document corpus with a free-text term and structured filters.\n\n"
        "| Parameter | Meaning | Default |\n"
        "|-----------|---------|---------|\n"
        "| `q` | free-text term | `\"\"` |\n"
        "| `types` | comma-separated type filter | none |\n"
        "| `tags` | comma-separated tags, all required | none |\n"
        "| `author` | exact author | none |\n"
        "| `from`, `to` | ISO bounds on `updatedAt` (inclusive) | none |\n"
        "| `sort` | `relevance` \\| `date` \\| `author` | `relevance` |\n"
        "| `order` | `asc` \\| `desc` | `desc` |\n"
        "| `page` | 1-based page number | `1` |\n"
        "| `limit` | page size, clamped to 1-100 | `20` |\n\n"
        "Items carry `score` only when results are ranked by relevance."
    ),
    responses={
        200: {"description": "One page of results (possibly empty)"},
        500: {"description": "Internal server error — the storage backend failed"},
    },
)
async def search(
    q: str | None = Query(default=None, description="Free-text term"),
    types: str | None = Query(default=None, description="Comma-separated document types"),
    tags: str | None = Query(default=None, description="Comma-separated tags (all required)"),
    author: str | None = Query(default=None, description="Exact author"),
    updated_from: str | None = Query(default=None, alias="from", description="Lower bound on updatedAt"),
    updated_to: str | None = Query(default=None, alias="to", description="Upper bound on updatedAt"),
    sort: str | None = Query(default=None, description="relevance | date | author"),
    order: str | None = Query(default=None, description="asc | desc"),
    page: str | None = Query(default=None, description="1-based page number"),
    limit: str | None = Query(default=None, description="Page size (1-100)"),
    coordinator: SearchCoordinator = Depends(get_coordinator),
) -> SearchResponse:
    """Run a document search."""
    params = {
        "q": q,
        "types": types,
        "tags": tags,
        "author": author,
        "from": updated_from,
        "to": updated_to,
        "sort": sort,
        "order": order,
        "page": page,
        "limit": limit,
    }
    try:
        return await coordinator.search(params)
    except Exception as e:
        logger.error("Search failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Search processing failed") from e

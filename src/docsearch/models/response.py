"""Search response models — Paginated output of a search request."""

from __future__ import annotations

from pydantic import BaseModel, Field

from docsearch.models.document import DocumentSummary


class SearchResponse(BaseModel):
    """One page of ranked search results.

    ``pages`` is ``ceil(total / limit)``, so an empty result has zero pages.
    A page past the end has no items but still reports ``total`` and ``pages``.
    """

    items: list[DocumentSummary] = Field(default_factory=list, description="Documents on the requested page")
    total: int = Field(default=0, ge=0, description="Number of matching documents across all pages")
    page: int = Field(default=1, ge=1, description="1-based page number")
    pages: int = Field(default=0, ge=0, description="Number of pages at the requested page size")

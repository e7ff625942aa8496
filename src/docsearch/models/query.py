"""Query models — Normalized representation of a search request.

``QueryDescriptor.from_params`` turns the raw, string-typed request
parameters into a validated descriptor.  Construction never fails:
malformed pagination is clamped, unparsable dates are dropped, and unknown
sort options fall back to defaults.  Search is read-only and idempotent, so
bad input degrades the query instead of rejecting it.
"""

from __future__ import annotations

import contextlib
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field

from docsearch.models.document import ensure_utc

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

_E = TypeVar("_E", bound=Enum)


class SortField(str, Enum):
    """Ordering applied to matching documents."""

    RELEVANCE = "relevance"
    DATE = "date"
    AUTHOR = "author"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class QueryDescriptor(BaseModel):
    """A parsed, always-valid search request.

    Invariant: relevance sorting requires a free-text term.  A descriptor
    built with an empty ``q`` and ``sort_field=relevance`` is normalized to
    ``date`` descending by :meth:`from_params`.
    """

    model_config = ConfigDict(frozen=True)

    q: str = Field(default="", description="Free-text term (may be empty)")
    types: frozenset[str] = Field(default_factory=frozenset, description="Allowed document types (empty = any)")
    tags: frozenset[str] = Field(default_factory=frozenset, description="Tags a document must all carry")
    author: str | None = Field(default=None, description="Exact author filter")
    updated_from: datetime | None = Field(default=None, description="Inclusive lower bound on updatedAt")
    updated_to: datetime | None = Field(default=None, description="Inclusive upper bound on updatedAt")
    sort_field: SortField = Field(default=SortField.RELEVANCE)
    sort_order: SortOrder = Field(default=SortOrder.DESC)
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)

    @classmethod
    def from_params(cls, params: Mapping[str, str | None]) -> QueryDescriptor:
        """Build a descriptor from raw request parameters.

        Args:
            params: String-keyed request parameters (``q``, ``types``,
                ``tags``, ``author``, ``from``, ``to``, ``sort``,
                ``order``, ``page``, ``limit``).  All optional.

        Returns:
            A valid descriptor with defaults substituted for invalid input.
        """
        q = (params.get("q") or "").strip()
        author = (params.get("author") or "").strip() or None

        sort_field = _parse_enum(SortField, params.get("sort"), SortField.RELEVANCE, SortField.DATE)
        sort_order = _parse_enum(SortOrder, params.get("order"), SortOrder.DESC, SortOrder.DESC)
        if not q and sort_field is SortField.RELEVANCE:
            sort_field, sort_order = SortField.DATE, SortOrder.DESC

        page = max(DEFAULT_PAGE, _parse_int(params.get("page"), DEFAULT_PAGE))
        limit = min(MAX_LIMIT, max(1, _parse_int(params.get("limit"), DEFAULT_LIMIT)))

        return cls(
            q=q,
            types=split_csv(params.get("types")),
            tags=split_csv(params.get("tags")),
            author=author,
            updated_from=parse_timestamp(params.get("from")),
            updated_to=parse_timestamp(params.get("to")),
            sort_field=sort_field,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )

    @property
    def offset(self) -> int:
        """Number of ranked matches preceding the requested page."""
        return (self.page - 1) * self.limit

    @property
    def relevance_mode(self) -> bool:
        return bool(self.q) and self.sort_field is SortField.RELEVANCE


# ── Parsing helpers ──────────────────────────────────────────────────────


def split_csv(raw: str | None) -> frozenset[str]:
    """Split a comma-separated value, dropping blanks and duplicates."""
    if not raw:
        return frozenset()
    return frozenset(token.strip() for token in raw.split(",") if token.strip())


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp or date; ``None`` when absent or invalid."""
    if not raw or not raw.strip():
        return None
    # Offsets near datetime.min/max overflow when shifted to UTC.
    with contextlib.suppress(ValueError, OverflowError):
        return ensure_utc(datetime.fromisoformat(raw.strip().replace("Z", "+00:00")))
    return None


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _parse_enum(enum_cls: type[_E], raw: str | None, default: _E, fallback: _E) -> _E:
    """Resolve ``raw`` to a member of ``enum_cls``.

    Missing values yield ``default``; unrecognized values yield ``fallback``.
    """
    if raw is None or not raw.strip():
        return default
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        return fallback

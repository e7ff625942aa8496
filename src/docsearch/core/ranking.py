"""Ranking strategies — Total orders over matching documents.

Two modes:

- **Relevance** (non-empty free-text term, ``sort=relevance``): every field
  that case-insensitively contains the term adds its weight
  (title 8, tags 4, author 2, content 1).  Ordered by score descending,
  then ``updatedAt`` descending.
- **Field sort** (``sort=date`` / ``sort=author``, or no term): ordered by
  the named field in the requested direction.  Author ties are always
  broken by ``updatedAt`` descending, whatever the primary direction.

Every ordering ends with ``slug`` ascending.  Slugs are unique, so each
strategy is a total order and repeated queries paginate identically.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docsearch.models.document import FIELD_WEIGHTS, DocumentRecord
from docsearch.models.query import QueryDescriptor, SortField, SortOrder


class RankedDocument(BaseModel):
    """A matching document paired with its relevance score, if any."""

    model_config = ConfigDict(frozen=True)

    record: DocumentRecord
    score: float | None = Field(default=None, description="Relevance score (relevance mode only)")


class RankingStrategy(ABC):
    """Produces a deterministic ordering of matching documents.

    Each strategy can order records in-process (``rank``) and describe the
    same ordering as an OpenSearch ``sort`` clause (``to_opensearch_sort``).
    """

    @property
    @abstractmethod
    def includes_score(self) -> bool:
        """Whether ranked results carry a relevance score."""

    @abstractmethod
    def score(self, record: DocumentRecord) -> float | None:
        """Compute the relevance score of ``record`` (None in field-sort mode)."""

    @abstractmethod
    def rank(self, records: Iterable[DocumentRecord]) -> list[RankedDocument]:
        """Return ``records`` in ranked order."""

    @abstractmethod
    def to_opensearch_sort(self) -> list[dict[str, Any]]:
        """Express the ordering as an OpenSearch ``sort`` clause."""


class RelevanceRanking(RankingStrategy):
    """Weighted substring scoring over title, tags, author, and content."""

    def __init__(self, term: str, weights: dict[str, int] | None = None) -> None:
        if not term:
            raise ValueError("Relevance ranking requires a non-empty term")
        self.term = term
        self.weights = weights or FIELD_WEIGHTS

    @property
    def includes_score(self) -> bool:
        return True

    def score(self, record: DocumentRecord) -> float:
        return float(sum(self.weights[f] for f in record.matched_fields(self.term) if f in self.weights))

    def rank(self, records: Iterable[DocumentRecord]) -> list[RankedDocument]:
        scored = [RankedDocument(record=r, score=self.score(r)) for r in records]
        # Stable sorts, least significant key first.
        scored.sort(key=lambda d: d.record.slug)
        scored.sort(key=lambda d: (d.score, d.record.updated_at), reverse=True)
        return scored

    def to_opensearch_sort(self) -> list[dict[str, Any]]:
        return [
            {"_score": {"order": "desc"}},
            {"updatedAt": {"order": "desc"}},
            {"slug": {"order": "asc"}},
        ]


class FieldSortRanking(RankingStrategy):
    """Ordering by ``updatedAt`` (``date``) or ``author``."""

    def __init__(self, field: SortField, order: SortOrder = SortOrder.DESC) -> None:
        if field is SortField.RELEVANCE:
            raise ValueError("Use RelevanceRanking for relevance ordering")
        self.field = field
        self.order = order

    @property
    def includes_score(self) -> bool:
        return False

    def score(self, record: DocumentRecord) -> None:
        return None

    def rank(self, records: Iterable[DocumentRecord]) -> list[RankedDocument]:
        ordered = sorted(records, key=lambda r: r.slug)
        descending = self.order is SortOrder.DESC
        if self.field is SortField.AUTHOR:
            ordered.sort(key=lambda r: r.updated_at, reverse=True)
            ordered.sort(key=lambda r: r.author, reverse=descending)
        else:
            ordered.sort(key=lambda r: r.updated_at, reverse=descending)
        return [RankedDocument(record=r) for r in ordered]

    def to_opensearch_sort(self) -> list[dict[str, Any]]:
        order = self.order.value
        if self.field is SortField.AUTHOR:
            return [
                {"author": {"order": order}},
                {"updatedAt": {"order": "desc"}},
                {"slug": {"order": "asc"}},
            ]
        return [
            {"updatedAt": {"order": order}},
            {"slug": {"order": "asc"}},
        ]


def build_ranking(descriptor: QueryDescriptor) -> RankingStrategy:
    """Select the ranking strategy for a query descriptor."""
    if descriptor.relevance_mode:
        return RelevanceRanking(descriptor.q)
    field = descriptor.sort_field
    if field is SortField.RELEVANCE:
        # Relevance without a term degrades to recency.
        return FieldSortRanking(SortField.DATE, SortOrder.DESC)
    return FieldSortRanking(field, descriptor.sort_order)

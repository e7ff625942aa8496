"""Filter predicate — Backend-agnostic boolean criteria over documents.

A ``FilterPredicate`` is derived mechanically from a ``QueryDescriptor``
and can be evaluated two ways:

  1. In-process, record by record (``matches``), used by the in-memory backend
  2. As an OpenSearch ``bool`` query (``to_opensearch_query``)

All tests are ANDed:
  - type membership (any type when ``types`` is empty)
  - tag superset (a record must carry every requested tag)
  - exact author equality
  - inclusive ``updatedAt`` range, each bound optional
  - free-text containment of ``term`` in at least one searchable field
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docsearch.models.document import FIELD_WEIGHTS, DocumentRecord
from docsearch.models.query import QueryDescriptor


class FilterPredicate(BaseModel):
    """Pure, immutable filter criteria."""

    model_config = ConfigDict(frozen=True)

    types: frozenset[str] = Field(default_factory=frozenset)
    tags: frozenset[str] = Field(default_factory=frozenset)
    author: str | None = None
    updated_from: datetime | None = None
    updated_to: datetime | None = None
    term: str = ""

    @classmethod
    def from_descriptor(cls, descriptor: QueryDescriptor) -> FilterPredicate:
        return cls(
            types=descriptor.types,
            tags=descriptor.tags,
            author=descriptor.author,
            updated_from=descriptor.updated_from,
            updated_to=descriptor.updated_to,
            term=descriptor.q,
        )

    # ── In-process evaluation ────────────────────────────────────────────

    def matches(self, record: DocumentRecord) -> bool:
        """Return True if ``record`` passes every test."""
        if self.types and record.type.value not in self.types:
            return False
        if self.tags and not self.tags <= record.tag_set:
            return False
        if self.author is not None and record.author != self.author:
            return False
        if self.updated_from is not None and record.updated_at < self.updated_from:
            return False
        if self.updated_to is not None and record.updated_at > self.updated_to:
            return False
        return not self.term or bool(record.matched_fields(self.term))

    # ── OpenSearch translation ───────────────────────────────────────────

    def to_opensearch_query(self) -> dict[str, Any]:
        """Express the predicate in the OpenSearch query DSL.

        Structured tests become non-scoring ``filter`` clauses; the free-text
        term becomes a weighted ``multi_match`` so the store can score it.
        Clauses are emitted in sorted order to keep the body deterministic.
        """
        filters: list[dict[str, Any]] = []
        if self.types:
            filters.append({"terms": {"type": sorted(self.types)}})
        # One term clause per tag: AND, not OR.
        filters.extend({"term": {"tags": tag}} for tag in sorted(self.tags))
        if self.author is not None:
            filters.append({"term": {"author": self.author}})
        if self.updated_from is not None or self.updated_to is not None:
            bounds: dict[str, str] = {}
            if self.updated_from is not None:
                bounds["gte"] = self.updated_from.isoformat()
            if self.updated_to is not None:
                bounds["lte"] = self.updated_to.isoformat()
            filters.append({"range": {"updatedAt": bounds}})

        must: list[dict[str, Any]] = []
        if self.term:
            must.append(
                {
                    "multi_match": {
                        "query": self.term,
                        "fields": [f"{name}^{weight}" for name, weight in FIELD_WEIGHTS.items()],
                        "type": "most_fields",
                    }
                }
            )

        if not filters and not must:
            return {"match_all": {}}
        query: dict[str, Any] = {}
        if must:
            query["must"] = must
        if filters:
            query["filter"] = filters
        return {"bool": query}

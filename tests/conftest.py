"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from docsearch.backends.memory.backend import InMemoryBackend
from docsearch.backends.memory.corpus import SAMPLE_DOCUMENTS
from docsearch.backends.opensearch.backend import OpenSearchBackend
from docsearch.config.settings import Settings
from docsearch.models.document import DocumentRecord

RecordFactory = Callable[..., DocumentRecord]


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults (no OpenSearch hosts)."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for DocumentRecord instances with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> DocumentRecord:
        counter["n"] += 1
        n = counter["n"]
        data: dict[str, Any] = {
            "id": f"doc-{n:03d}",
            "title": f"Document {n}",
            "slug": f"document-{n}",
            "type": "markdown",
            "tags": [],
            "author": "core",
            "contentText": "",
            "updatedAt": "2025-01-01T00:00:00Z",
        }
        data.update(overrides)
        return DocumentRecord.model_validate(data)

    return _make


@pytest.fixture
def sample_documents() -> tuple[DocumentRecord, ...]:
    """The built-in fallback corpus (getting-started, api-reference, export-pdf)."""
    return SAMPLE_DOCUMENTS


@pytest.fixture
def library(make_record: RecordFactory) -> list[DocumentRecord]:
    """A richer corpus exercising every filter and ordering."""
    return [
        make_record(
            title="API Reference",
            slug="api-reference",
            tags=["api", "reference"],
            author="core",
            contentText="Endpoints, auth using JWT, RBAC scopes.",
            updatedAt="2025-02-10T08:00:00Z",
        ),
        make_record(
            title="Getting Started Guide",
            slug="getting-started",
            tags=["guide", "intro"],
            author="core",
            contentText="Install and begin. Calling the api is covered later.",
            updatedAt="2025-01-01T10:00:00Z",
        ),
        make_record(
            title="Export to PDF",
            slug="export-pdf",
            type="pdf",
            tags=["export", "pdf"],
            author="tools",
            contentText="How to export documents to PDF and best practices.",
            updatedAt="2025-02-20T12:00:00Z",
        ),
        make_record(
            title="Print Layouts",
            slug="print-layouts",
            type="pdf",
            tags=["print"],
            author="tools",
            contentText="Page sizes for pdf output.",
            updatedAt="2025-01-15T09:00:00Z",
        ),
        make_record(
            title="Word Templates",
            slug="word-templates",
            type="word",
            tags=["guide", "templates"],
            author="api-team",
            contentText="Reusable templates.",
            updatedAt="2025-03-01T00:00:00Z",
        ),
        make_record(
            title="Archived PDF Notes",
            slug="archived-pdf-notes",
            type="pdf",
            tags=["archive"],
            author="archive",
            contentText="Old notes.",
            updatedAt="2024-11-30T23:59:59Z",
        ),
    ]


# ── OpenSearch test double ───────────────────────────────────────────────────


def _stored_source(record: DocumentRecord) -> dict[str, Any]:
    source = record.model_dump(by_alias=True, mode="json")
    source.pop("id")
    return source


class FakeOpenSearch:
    """In-process stand-in for ``AsyncOpenSearch``.

    Evaluates the subset of the query DSL that ``OpenSearchBackend`` emits
    (``match_all``, ``bool`` with ``multi_match``/``terms``/``term``/``range``,
    field sorts, ``from``/``size``) over a list of stored documents.
    Free-text matching is case-insensitive substring containment with
    per-field boosts summed into ``_score``.
    """

    def __init__(self, records: list[DocumentRecord]) -> None:
        self.docs = [(r.id, _stored_source(r)) for r in records]
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        self.calls.append({"index": index, "body": body})
        hits = []
        for doc_id, source in self.docs:
            score = self._evaluate(body["query"], source)
            if score is not None:
                hits.append({"_index": index, "_id": doc_id, "_score": score, "_source": source})

        for clause in reversed(body.get("sort", [])):
            ((field, spec),) = clause.items()
            reverse = spec["order"] == "desc"
            if field == "_score":
                hits.sort(key=lambda h: h["_score"], reverse=reverse)
            elif field == "updatedAt":
                hits.sort(key=lambda h: _parse(h["_source"]["updatedAt"]), reverse=reverse)
            else:
                hits.sort(key=lambda h, f=field: h["_source"][f], reverse=reverse)

        start = body.get("from", 0)
        window = hits[start : start + body.get("size", 10)]
        return {"took": 1, "hits": {"total": {"value": len(hits), "relation": "eq"}, "hits": window}}

    async def close(self) -> None:
        self.closed = True

    def _evaluate(self, query: dict[str, Any], source: dict[str, Any]) -> float | None:
        """Return the document score, or None if it does not match."""
        if "match_all" in query:
            return 1.0
        bool_query = query["bool"]
        for clause in bool_query.get("filter", []):
            if not self._filter_matches(clause, source):
                return None
        score = 0.0
        for clause in bool_query.get("must", []):
            mm = clause["multi_match"]
            needle = mm["query"].lower()
            clause_score = 0.0
            for spec in mm["fields"]:
                name, _, boost = spec.partition("^")
                value = source.get(name, "")
                text = ",".join(value) if isinstance(value, list) else str(value)
                if needle in text.lower():
                    clause_score += float(boost or 1)
            if clause_score == 0:
                return None
            score += clause_score
        return score or 1.0

    @staticmethod
    def _filter_matches(clause: dict[str, Any], source: dict[str, Any]) -> bool:
        if "terms" in clause:
            ((field, values),) = clause["terms"].items()
            return source.get(field) in values
        if "term" in clause:
            ((field, value),) = clause["term"].items()
            stored = source.get(field)
            return value in stored if isinstance(stored, list) else stored == value
        if "range" in clause:
            ((field, bounds),) = clause["range"].items()
            stored = _parse(source[field])
            if "gte" in bounds and stored < _parse(bounds["gte"]):
                return False
            return not ("lte" in bounds and stored > _parse(bounds["lte"]))
        raise AssertionError(f"Unsupported filter clause: {clause}")


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def fake_opensearch_backend() -> Callable[[list[DocumentRecord]], OpenSearchBackend]:
    """Build an OpenSearchBackend wired to a FakeOpenSearch over ``records``."""

    def _build(records: list[DocumentRecord]) -> OpenSearchBackend:
        backend = OpenSearchBackend(hosts=["https://localhost:9200"], index="test-docs")
        backend._client = FakeOpenSearch(list(records))
        return backend

    return _build


@pytest.fixture
def memory_backend() -> Callable[[list[DocumentRecord]], InMemoryBackend]:
    def _build(records: list[DocumentRecord]) -> InMemoryBackend:
        return InMemoryBackend(records)

    return _build

"""Document models — The searchable record and its public summary.

Records are read-only from the search engine's point of view: they are
created and edited elsewhere and reach this package already stored in one
of the storage backends.  Field names follow the stored document layout
(``contentText``, ``updatedAt``) on the wire and snake_case in Python.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Stored field name -> relevance weight for free-text matches.
FIELD_WEIGHTS: dict[str, int] = {"title": 8, "tags": 4, "author": 2, "contentText": 1}


class DocumentType(str, Enum):
    """Closed set of document formats."""

    MARKDOWN = "markdown"
    PDF = "pdf"
    WORD = "word"


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class DocumentRecord(BaseModel):
    """A single searchable document."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(description="Backend-assigned unique identifier")
    title: str = Field(min_length=1, description="Document title")
    slug: str = Field(min_length=1, description="Unique human-readable key")
    type: DocumentType = Field(description="Document format")
    tags: tuple[str, ...] = Field(default=(), description="Tag set (order irrelevant)")
    author: str = Field(default="", description="Authoring principal")
    content_text: str = Field(default="", alias="contentText", description="Plain-text body used for matching")
    updated_at: datetime = Field(alias="updatedAt", description="Last modification timestamp")

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v: Any) -> tuple[str, ...]:
        """Drop blank tags and collapse duplicates, keeping first-seen order."""
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        seen: dict[str, None] = {}
        for tag in v:
            tag = str(tag).strip()
            if tag:
                seen.setdefault(tag, None)
        return tuple(seen)

    @field_validator("updated_at")
    @classmethod
    def _aware_timestamp(cls, v: datetime) -> datetime:
        try:
            return ensure_utc(v)
        except OverflowError as e:
            raise ValueError(f"updatedAt out of range in UTC: {v.isoformat()}") from e

    @property
    def tag_set(self) -> frozenset[str]:
        return frozenset(self.tags)

    def field_text(self, field: str) -> str:
        """Return the text of a stored field as used for free-text matching."""
        if field == "title":
            return self.title
        if field == "tags":
            return ",".join(self.tags)
        if field == "author":
            return self.author
        if field == "contentText":
            return self.content_text
        raise KeyError(field)

    def matched_fields(self, term: str) -> list[str]:
        """Stored fields that case-insensitively contain ``term``."""
        needle = term.lower()
        return [field for field in FIELD_WEIGHTS if needle in self.field_text(field).lower()]


class DocumentSummary(BaseModel):
    """Public view of a matching document returned by the search API.

    ``score`` is only populated when the result was ranked by relevance;
    the API omits it otherwise.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str
    slug: str
    type: DocumentType
    tags: list[str] = Field(default_factory=list)
    author: str = ""
    updated_at: datetime = Field(alias="updatedAt")
    score: float | None = Field(default=None, description="Relevance score (relevance mode only)")

    @classmethod
    def from_record(cls, record: DocumentRecord, score: float | None = None) -> DocumentSummary:
        return cls(
            title=record.title,
            slug=record.slug,
            type=record.type,
            tags=list(record.tags),
            author=record.author,
            updated_at=record.updated_at,
            score=score,
        )

"""Fallback corpus — Documents served when the durable store is unreachable.

``SAMPLE_DOCUMENTS`` is the built-in dataset.  ``load_corpus`` reads a
replacement from a JSON or YAML file holding a list of documents in the
stored layout (``contentText``, ``updatedAt``).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from docsearch.backends.base.exceptions import ConfigurationError
from docsearch.models.document import DocumentRecord

logger = logging.getLogger(__name__)

_CORPUS_ADAPTER = TypeAdapter(list[DocumentRecord])

SAMPLE_DOCUMENTS: tuple[DocumentRecord, ...] = tuple(
    _CORPUS_ADAPTER.validate_python(
        [
            {
                "id": "mem-getting-started",
                "title": "Getting Started Guide",
                "slug": "getting-started",
                "type": "markdown",
                "tags": ["guide", "intro"],
                "author": "core",
                "contentText": "Install, setup, and begin using DocuSphere. Tags and search.",
                "updatedAt": "2025-01-01T10:00:00Z",
            },
            {
                "id": "mem-api-reference",
                "title": "API Reference",
                "slug": "api-reference",
                "type": "markdown",
                "tags": ["api", "reference"],
                "author": "core",
                "contentText": "Endpoints, auth using JWT, RBAC scopes.",
                "updatedAt": "2025-02-10T08:00:00Z",
            },
            {
                "id": "mem-export-pdf",
                "title": "Export to PDF",
                "slug": "export-pdf",
                "type": "pdf",
                "tags": ["export", "pdf"],
                "author": "tools",
                "contentText": "How to export documents to PDF and best practices.",
                "updatedAt": "2025-02-20T12:00:00Z",
            },
        ]
    )
)


def load_corpus(path: str | Path) -> tuple[DocumentRecord, ...]:
    """Load a fallback corpus from a JSON or YAML file.

    Args:
        path: File containing a list of documents.  ``.yaml``/``.yml`` files
            are parsed as YAML, anything else as JSON.

    Returns:
        The validated documents.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the content is not a valid document list or
            two documents share a slug.
    """
    corpus_path = Path(path)
    if not corpus_path.exists():
        raise FileNotFoundError(f"Corpus file not found: {corpus_path}")

    with open(corpus_path, encoding="utf-8") as f:
        if corpus_path.suffix.lower() in {".yaml", ".yml"}:
            import yaml  # type: ignore[import-untyped]

            data = yaml.safe_load(f) or []
        else:
            data = json.load(f)

    try:
        documents = tuple(_CORPUS_ADAPTER.validate_python(data))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid corpus file {corpus_path}: {e}") from e

    slugs = [doc.slug for doc in documents]
    duplicates = sorted({s for s in slugs if slugs.count(s) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate slugs in corpus file {corpus_path}: {duplicates}")

    logger.info("Loaded %d documents from %s", len(documents), corpus_path)
    return documents

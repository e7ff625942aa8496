"""Storage backend layer — Where ranked matches come from.

Built-in backends:
  - opensearch: durable, already-indexed OpenSearch (v2+) store
  - memory: in-process fallback over a small fixed corpus

Both implement ``StorageBackend`` and must return identical totals and
orderings for identical queries over the same corpus.
"""

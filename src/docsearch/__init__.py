"""docsearch — Filtered, ranked, paginated document retrieval over pluggable storage backends."""

__version__ = "0.1.0"

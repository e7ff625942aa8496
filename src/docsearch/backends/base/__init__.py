"""Base backend interface — Abstract contract for storage backends."""

from docsearch.backends.base.backend import BackendHealth, BackendResult, StorageBackend

__all__ = ["BackendHealth", "BackendResult", "StorageBackend"]

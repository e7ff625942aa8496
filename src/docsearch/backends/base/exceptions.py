"""Backend-specific exceptions."""


class BackendError(Exception):
    """Base exception for storage backend errors."""


class BackendUnavailableError(BackendError):
    """Raised when the backend's store cannot be reached."""


class QueryError(BackendError):
    """Raised when a search query fails."""


class ConfigurationError(BackendError):
    """Raised when backend configuration is invalid."""

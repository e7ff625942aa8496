"""Service configuration.

``Settings()`` reads ``DOCSEARCH_*`` environment variables and ``.env`` on top
of the defaults below.  ``Settings.from_yaml()`` passes the file's sections as
explicit values, so a key set in YAML wins over the same key in the
environment; keys the file leaves out still come from the environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=3000, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class StoreSettings(BaseModel):
    """Durable document store (OpenSearch) configuration.

    Leave ``hosts`` empty to run on the in-memory fallback corpus.
    """

    hosts: list[str] = Field(default_factory=list, description="OpenSearch node URLs")
    index: str = Field(default="documents", description="Index or alias holding the documents")
    username: str | None = Field(default=None, description="Authentication username")
    password: str | None = Field(default=None, description="Authentication password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra AsyncOpenSearch client options")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var), comma-separated string, or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            return [h.strip() for h in v.split(",") if h.strip()]
        return list(v)


class FallbackSettings(BaseModel):
    """In-memory fallback backend configuration."""

    corpus_path: str | None = Field(
        default=None,
        description="JSON/YAML file with the fallback corpus (None = built-in sample documents)",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the DOCSEARCH_ prefix.
    Nested settings use double underscores: DOCSEARCH_SERVER__PORT=9090

    Example:
        DOCSEARCH_SERVER__PORT=9090
        DOCSEARCH_STORE__HOSTS=https://search-1:9200,https://search-2:9200
        DOCSEARCH_FALLBACK__CORPUS_PATH=./corpus.yaml
    """

    model_config = {
        "env_prefix": "DOCSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    server: ServerSettings = Field(default_factory=ServerSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    fallback: FallbackSettings = Field(default_factory=FallbackSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Build settings from a YAML file shaped like this model.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        return cls(**data)

"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend and limit values are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Firebase credentials are optional at load time: without them the
    Firestore client is not initialized and data endpoints answer 503.
    """

    # App
    app_name: str = "visita"
    app_version: str = "1.0.0"
    debug: bool = False

    # Document store: "firestore" (REST API) or "memory" (process-local, for dev/tests)
    database_backend: str = "firestore"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    # Audience for ID token verification; defaults to the service account's project_id.
    firebase_project_id: str | None = None
    firestore_timeout_seconds: float = 30.0

    # CORS
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Audit log queries (no pagination cursor; hard cap on rows per query)
    audit_query_default_limit: int = 50
    audit_query_max_limit: int = 500

    # Telemetry (OpenTelemetry tracing; exporter: console, otlp, jaeger or none)
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_jaeger_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend_and_limits(self) -> "Settings":
        """Validate database backend, audit query limits and trace sampling rate."""
        if self.database_backend not in ("firestore", "memory"):
            raise ValueError(
                f"database_backend must be 'firestore' or 'memory', got: {self.database_backend!r}"
            )
        if self.audit_query_max_limit < 1:
            raise ValueError("AUDIT_QUERY_MAX_LIMIT must be at least 1")
        if not 1 <= self.audit_query_default_limit <= self.audit_query_max_limit:
            raise ValueError(
                "AUDIT_QUERY_DEFAULT_LIMIT must be between 1 and AUDIT_QUERY_MAX_LIMIT"
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

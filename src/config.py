"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Node settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "qdrant-advanced"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Qdrant client
    qdrant_timeout_seconds: int = 30

    # Search
    search_default_limit: int = 50
    search_max_limit: int | None = None  # None disables the upper bound

    # Error policy
    collapse_validation_errors: bool = False  # Re-wrap validation errors as remote

    # Observability (OpenTelemetry)
    otel_enabled: bool = False
    otel_endpoint: str | None = None  # e.g. "http://localhost:4318"
    otel_console_export: bool = False
    otel_sample_rate: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application settings parsed from environment variables and defaults."""

import json
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
SUPPORTED_LOCALES = ("es", "en")


def _split_list(value: str | list[str] | None) -> list[str]:
    """Normalize list settings from JSON, CSV, or list inputs."""
    if isinstance(value, list):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return []
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return [str(item).strip() for item in parsed if str(item).strip()]
        return [item.strip() for item in stripped.split(",") if item.strip()]
    return []


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "GeekHub API"
    environment: str = "development"
    api_prefix: str = "/api"

    rawg_api_key: Optional[str] = None
    tmdb_api_key: Optional[str] = None
    tmdb_api_auth_header: Optional[str] = None
    provider_timeout_seconds: float = 10.0
    provider_retry_attempts: int = 3
    provider_circuit_threshold: int = 3

    stats_max_rows: int = 5000
    stats_top_rated_limit: int = 5
    display_locale: str = "es"

    log_level: str = "INFO"
    cors_origins: list[str] | str = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())
    health_allowlist: list[str] | str = Field(default_factory=list)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, value: str | list[str] | None) -> list[str]:
        """Normalize CORS origins, falling back to the local frontend."""
        return _split_list(value) or DEFAULT_CORS_ORIGINS.copy()

    @field_validator("health_allowlist", mode="before")
    @classmethod
    def _split_health_allowlist(cls, value: str | list[str] | None) -> list[str]:
        """Normalize health allowlist entries from JSON, CSV, or list inputs."""
        return _split_list(value)

    @field_validator("display_locale")
    @classmethod
    def _check_display_locale(cls, value: str) -> str:
        """Only accept locales with a month label table."""
        locale = value.strip().lower()
        if locale not in SUPPORTED_LOCALES:
            raise ValueError(f"DISPLAY_LOCALE must be one of {', '.join(SUPPORTED_LOCALES)}")
        return locale

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings to avoid re-parsing environment variables."""
    return Settings()


settings = get_settings()

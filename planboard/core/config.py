"""Application settings and environment configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
PRODUCTION_API_BASE_URL = "https://heyes-server.vercel.app"
LOG_FORMATS = frozenset({"text", "json"})


class Settings(BaseSettings):
    """Typed runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        # Load the project `.env` regardless of current working directory.
        env_file=[DEFAULT_ENV_FILE, ".env"],
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "dev"

    # Remote data-access layer
    api_base_url: str = "http://localhost:5000"
    api_token: str = ""
    request_timeout_seconds: float = Field(default=15.0, gt=0)

    # Public holidays, fetched per year and zone.
    holiday_api_url: str = "https://calendrier.api.gouv.fr/jours-feries/{zone}/{year}.json"
    holiday_zone: str = "metropole"

    # Transient notifications
    notification_ttl_seconds: float = Field(default=3.0, ge=0)

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_use_utc: bool = False

    @model_validator(mode="after")
    def _defaults(self) -> Self:
        # Read before any assignment; setting a field marks it as explicitly set.
        explicit_base_url = "api_base_url" in self.model_fields_set
        if not explicit_base_url and self.environment == "production":
            self.api_base_url = PRODUCTION_API_BASE_URL
        self.api_base_url = self.api_base_url.rstrip("/")
        log_format = self.log_format.strip().lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(
                f"LOG_FORMAT must be one of: {', '.join(sorted(LOG_FORMATS))}.",
            )
        self.log_format = log_format
        return self


settings = Settings()

"""Configuration for the news feed dashboard client."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, PositiveInt, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings, fixed once the dashboard starts."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    api_base_url: str = Field(
        "http://localhost:8080/api/scraping",
        alias="NEWSFEED_API_BASE_URL",
        description="Base URL of the scraping API.",
    )
    refresh_interval_seconds: PositiveInt = Field(
        300,
        alias="NEWSFEED_REFRESH_INTERVAL_SECONDS",
        description="Periodic refresh interval (seconds).",
    )
    request_timeout_seconds: PositiveInt = Field(10, alias="NEWSFEED_REQUEST_TIMEOUT_SECONDS", description="HTTP timeout (seconds)")
    max_attempts: PositiveInt = Field(2, alias="NEWSFEED_MAX_ATTEMPTS", description="Attempts per fetch on transient errors")
    portals_path: str = Field("/portals", alias="NEWSFEED_PORTALS_PATH", description="Grouped-by-portal resource")
    articles_path: str = Field("/articles", alias="NEWSFEED_ARTICLES_PATH", description="Flat article list resource")
    display_timezone: Optional[str] = Field(
        None,
        alias="NEWSFEED_TIMEZONE",
        description="IANA zone used for dates; system local zone when unset.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Root log level.")
    log_json: bool = Field(False, alias="LOG_JSON", description="Emit logs as JSON lines.")

    @field_validator("api_base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        url = value.strip()
        if "://" not in url:
            raise ValueError("NEWSFEED_API_BASE_URL must be an absolute URL.")
        return url.rstrip("/")

    @field_validator("portals_path", "articles_path")
    @classmethod
    def _validate_path(cls, value: str) -> str:
        path = value.strip()
        if not path.startswith("/"):
            raise ValueError("resource paths must start with '/'.")
        return path

    @field_validator("display_timezone")
    @classmethod
    def _validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        name = value.strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone: {name}") from exc
        return name

    def tzinfo(self) -> Optional[ZoneInfo]:
        """Zone for local calendar dates; ``None`` means the system zone."""
        return ZoneInfo(self.display_timezone) if self.display_timezone else None


@lru_cache()
def get_settings() -> Settings:
    """Return the Settings instance built from the environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"settings validation failed: {exc}") from exc


def reset_settings_cache() -> None:
    """Clear the Settings LRU cache (tests)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]

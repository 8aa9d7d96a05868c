import logging
from typing import List

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

# Session cookie replayed from a browser visit to the calendar page.
# CALDATE/CALVIEW are appended per request by the calendar scraper.
DEFAULT_UPSTREAM_COOKIE = (
    "wfx_unq=1UFMH2Zpyl68DE6k; cfid=e7e60dae-33cf-4fdf-aabd-38328c1adbc5; "
    "cftoken=0; ERD=30B2F5090B2BE8E73FA88560548E6651F6F90073D7B4BBBF1BEA2946CA9FADAA"
)


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Upstream calendar
    upstream_url: HttpUrl = Field(
        "https://goffstownathletics.com/main/calendarWeekEvents",
        description="Calendar endpoint returning a week of events.",
    )
    upstream_referer: str = Field(
        "https://goffstownathletics.com/main/calendar",
        description="Referer header sent with the calendar request.",
    )
    upstream_cookie: str = Field(
        DEFAULT_UPSTREAM_COOKIE, description="Session cookie for the calendar site."
    )
    request_timeout_seconds: float = Field(
        10.0,
        gt=0,
        description="Deadline for the whole upstream request, also applied per connect/read/write.",
    )

    # Schedule
    week_starts_on: int = Field(
        6,
        ge=0,
        le=6,
        description="Weekday the week starts on (Monday=0 ... Sunday=6).",
    )
    cache_refresh_seconds: float = Field(
        0,
        ge=0,
        description="Refresh interval for the cached schedule. 0 disables the cache.",
    )

    # Server
    host: str = Field("0.0.0.0", description="Interface the API binds to.")
    port: int = Field(8000, ge=1, le=65535, description="Port the API binds to.")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        validate_default=True,
    )

    @property
    def cache_enabled(self) -> bool:
        return self.cache_refresh_seconds > 0


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()

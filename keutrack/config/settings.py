"""
Configuration Management for KeuTrack

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The API client does NOT read these settings on its own: the caller builds
an ApiSettings (or takes the one from get_settings()) and hands it to the
client it owns.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Backend API connection and retry policy."""

    model_config = SettingsConfigDict(
        env_prefix="KEUTRACK_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:2001/api",
        description="Base URL of the KeuTrack backend API"
    )
    auth_token: Optional[str] = Field(
        default=None,
        description="Bearer token attached to every request, if known up front"
    )

    # Retry policy
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts per request (first try included)"
    )
    base_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Initial backoff delay in seconds"
    )
    max_delay: float = Field(
        default=10.0,
        ge=0.0,
        description="Upper bound for a single backoff delay in seconds"
    )
    jitter: float = Field(
        default=0.5,
        ge=0.0,
        description="Maximum random jitter added to each delay in seconds"
    )
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout in seconds"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoints are joined with a leading slash."""
        return v.rstrip("/")


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG level with the console renderer"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Level for the keutrack loggers"
    )
    log_json: bool = Field(
        default=True,
        description="Render log lines as JSON (console renderer otherwise)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.api
        results["api"] = True
    except Exception as e:
        results["api"] = False
        results["api_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results

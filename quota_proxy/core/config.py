"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

The upstream credential (ANTHROPIC_API_KEY) is optional at load time. A
missing key is reported on each proxied request instead of failing startup.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first.
# Values already exported in the environment win over the file.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


DEFAULT_MAX_FREE_USES = 10
DEFAULT_QUOTA_WINDOW_SECONDS = 24 * 60 * 60


def _build_upstream_settings() -> "UpstreamSettings":
    """Build upstream settings from environment.

    Pydantic Settings (v2) populates values from environment variables, but
    static type checkers treat fields as constructor arguments.
    """

    return UpstreamSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class UpstreamSettings(BaseSettings):
    """Anthropic Messages API connection settings."""

    api_key: str | None = Field(
        None,
        description="Anthropic API key; requests fail with 500 while unset",
    )
    base_url: str = Field(
        "https://api.anthropic.com",
        description="Upstream API origin",
    )
    messages_path: str = Field(
        "/v1/messages",
        description="Path of the Messages endpoint on the upstream API",
    )
    version: str = Field(
        "2023-06-01",
        description="Value sent in the anthropic-version header",
    )
    timeout_seconds: float = Field(
        60.0,
        description="Timeout for the upstream call in seconds",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="ANTHROPIC_",
        case_sensitive=False,
    )

    @property
    def messages_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.messages_path.lstrip("/")


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    max_free_uses: int = Field(
        DEFAULT_MAX_FREE_USES,
        description="Successful upstream calls allowed per client per window",
        ge=1,
    )
    quota_window_seconds: int = Field(
        DEFAULT_QUOTA_WINDOW_SECONDS,
        description="Length of the rolling quota window, starting at first use",
        ge=1,
    )
    client_id_header: str = Field(
        "x-client-id",
        description="Header carrying the caller-supplied client identifier",
    )
    forwarded_for_header: str = Field(
        "x-forwarded-for",
        description="Fallback header used when no client identifier is sent",
    )
    anonymous_client_id: str = Field(
        "anonymous",
        description="Shared quota bucket for otherwise unidentified clients",
    )
    cors_allow_origins: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        0,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated log files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    """

    app_env: str = APP_ENV
    upstream: UpstreamSettings = Field(default_factory=_build_upstream_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance, read once at import time.
settings = Settings()

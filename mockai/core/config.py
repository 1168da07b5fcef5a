"""Application configuration using Pydantic Settings.

Configuration is read once at startup and is immutable afterwards:
- APP_ENV selects which .env file to load (``.env.{APP_ENV}``, else ``.env``)
- Each concern (server, rate limit, logging) has its own settings group
- ``create_app`` receives the assembled ``Settings`` explicitly
"""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mockai.utils.byte_size import parse_byte_size


APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

_env_path = PROJECT_ROOT / f".env.{APP_ENV}"
if not _env_path.is_file():
    _env_path = PROJECT_ROOT / ".env"

# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_path.is_file() and not os.getenv("TESTING"):
    from dotenv import load_dotenv
    load_dotenv(_env_path, override=False)


def _positive_or_none(value: Any) -> float | None:
    """Coerce a raw setting to a positive finite number, or None."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


class ServerSettings(BaseSettings):
    """HTTP server and request handling configuration."""

    server_host: str = Field(
        "0.0.0.0",
        description="Interface the server binds to",
    )
    server_port: int = Field(
        5001,
        description="Port the server listens on",
        ge=1,
        le=65535,
    )
    request_size_limit: str = Field(
        "10kb",
        description="Maximum request body size, e.g. 512, 10kb, 1.5mb",
    )
    response_delay_ms: int = Field(
        0,
        description="Default artificial delay applied to GET / in milliseconds",
    )
    mock_content_file: str | None = Field(
        None,
        description="Optional text file with one sentence per line for mock responses",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        frozen=True,
    )

    @field_validator("request_size_limit")
    @classmethod
    def _validate_size_limit(cls, value: str) -> str:
        parse_byte_size(value)
        return value

    @field_validator("response_delay_ms", mode="before")
    @classmethod
    def _non_negative_delay(cls, value: Any) -> int:
        try:
            delay = int(value)
        except (TypeError, ValueError):
            return 0
        return max(delay, 0)

    @property
    def request_size_limit_bytes(self) -> int:
        return parse_byte_size(self.request_size_limit)


class RateLimitSettings(BaseSettings):
    """Token bucket rate limiting configuration.

    The limiter is only active when both ``burst`` and ``rpm`` are set to
    positive numbers. Missing or invalid values leave it disabled.
    """

    burst: float | None = Field(
        None,
        description="Bucket capacity (maximum burst of requests per model)",
    )
    rpm: float | None = Field(
        None,
        description="Tokens refilled per minute for each model bucket",
    )
    include_headers: bool = Field(
        False,
        description="Include Retry-After and X-RateLimit-* headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
        frozen=True,
    )

    @field_validator("burst", "rpm", mode="before")
    @classmethod
    def _disable_on_invalid(cls, value: Any) -> float | None:
        return _positive_or_none(value)

    @property
    def enabled(self) -> bool:
        return self.burst is not None and self.rpm is not None


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stderr", description="Log destination: stderr, stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(0, description="Rotate the log file at this size (0 disables)")
    backup_count: int = Field(3, description="Rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
        frozen=True,
    )


def _build_server_settings() -> ServerSettings:
    return ServerSettings()


def _build_rate_limit_settings() -> RateLimitSettings:
    return RateLimitSettings()


def _build_log_settings() -> LogSettings:
    return LogSettings()


class Settings(BaseSettings):
    """Main application settings container.

    Nested settings are created via default_factory so env loading works.
    Tests build their own instance and pass it to ``create_app``.
    """

    app_env: str = APP_ENV
    server: ServerSettings = Field(default_factory=_build_server_settings)
    rate_limit: RateLimitSettings = Field(default_factory=_build_rate_limit_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
        frozen=True,
    )


def get_settings() -> Settings:
    """Assemble settings from the current environment."""

    return Settings()

"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so no .env file is loaded, and scrubs server settings
from the environment so every test starts from the defaults.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

for _name in (
    "RATE_LIMIT_BURST",
    "RATE_LIMIT_RPM",
    "RATE_LIMIT_INCLUDE_HEADERS",
    "REQUEST_SIZE_LIMIT",
    "RESPONSE_DELAY_MS",
    "SERVER_PORT",
    "SERVER_HOST",
    "MOCK_CONTENT_FILE",
    "LOG_OUTPUT",
    "LOG_FORMAT",
):
    os.environ.pop(_name, None)

from typing import Any, Callable  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from mockai.core.app_factory import create_app  # noqa: E402
from mockai.core.config import RateLimitSettings, ServerSettings, Settings  # noqa: E402


def build_settings(
    *,
    server: dict[str, Any] | None = None,
    rate_limit: dict[str, Any] | None = None,
) -> Settings:
    """Build Settings with explicit overrides for the server and limiter groups."""
    return Settings(
        server=ServerSettings(**(server or {})),
        rate_limit=RateLimitSettings(**(rate_limit or {})),
    )


@pytest.fixture
def make_app() -> Callable[..., FastAPI]:
    """Factory for isolated apps (own limiter, metrics registry and state)."""

    def _make(**overrides: Any) -> FastAPI:
        return create_app(build_settings(**overrides))

    return _make


@pytest.fixture
def app(make_app) -> FastAPI:
    return make_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)

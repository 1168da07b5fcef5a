from __future__ import annotations

"""Application factory for the FastAPI app.

Builds every stateful collaborator (rate limiter, metrics, delay injector,
content corpus) once from an immutable ``Settings`` value and wires them
into the request pipeline and ``app.state``.
"""

import time

from fastapi import FastAPI

from mockai.adapters.rate_limit import build_rate_limiter
from mockai.adapters.rate_limit.base import Clock
from mockai.api.routes import API_ROUTERS, health_router
from mockai.core.config import Settings, get_settings
from mockai.core.delay import DelayInjector
from mockai.core.exception_handlers import setup_exception_handlers
from mockai.core.logging import configure_logging
from mockai.core.metrics import MetricsCollector
from mockai.core.pipeline import RequestPipeline
from mockai.services.content import RandomContent


def create_app(
    settings: Settings | None = None,
    *,
    rate_limit_clock: Clock = time.monotonic,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Configuration to use; read from the environment if omitted.
        rate_limit_clock: Time source for the token buckets.

    Returns:
        Configured FastAPI app with pipeline, handlers and routers.
    """
    settings = settings or get_settings()

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="MockAI",
        description=(
            "Mock OpenAI-style API for testing clients without a real backend. "
            "Supports per-model token bucket throttling, injected latency and "
            "Prometheus metrics."
        ),
        version="0.1.0",
        # Only the mocked API is served; anything else falls through to 404
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    metrics = MetricsCollector()
    rate_limiter = build_rate_limiter(settings.rate_limit, clock=rate_limit_clock)

    app.state.settings = settings
    app.state.metrics = metrics
    app.state.rate_limiter = rate_limiter
    app.state.delay_injector = DelayInjector(settings.server.response_delay_ms)
    app.state.content = RandomContent.load(settings.server.mock_content_file)

    # Pipeline
    app.middleware("http")(
        RequestPipeline(
            rate_limiter=rate_limiter,
            metrics=metrics,
            body_limit_bytes=settings.server.request_size_limit_bytes,
            request_id_header=settings.log.request_id_header,
            include_rate_limit_headers=settings.rate_limit.include_headers,
        )
    )

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    for router in API_ROUTERS:
        app.include_router(router)
    app.include_router(health_router)

    return app

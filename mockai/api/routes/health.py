from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from mockai.api.deps import get_delay_injector, get_metrics
from mockai.core.delay import DelayInjector
from mockai.core.metrics import MetricsCollector

router = APIRouter(tags=["Health"])

GREETING = "Hello World! This is MockAI"


@router.get("/", response_class=PlainTextResponse)
async def health_check(
    request: Request,
    delay_injector: DelayInjector = Depends(get_delay_injector),
) -> PlainTextResponse:
    """Health check endpoint.

    Waits for the injected delay (``X-Set-Response-Delay-Ms`` header or the
    configured default) before answering, so clients can simulate a slow
    backend.
    """

    await delay_injector.apply(request)
    return PlainTextResponse(GREETING)


@router.get("/metrics")
def metrics(collector: MetricsCollector = Depends(get_metrics)) -> Response:
    """Prometheus scrape endpoint."""

    return Response(content=collector.snapshot(), media_type=collector.content_type)

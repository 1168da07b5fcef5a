"""HTTP request admission pipeline.

Every request flows through a fixed, ordered list of stages before it
reaches a route handler:

1. read the body and enforce the size limit
2. consult the rate limiter with the requested model
3. tag the request with a correlation id
4. register the access log sinks
5. dispatch to the first fully matching route, or answer 404

A stage continues by returning and terminates the request by raising a
``PipelineError``. Whatever the exit path (terminating stage, handler
response, or handler failure), the pipeline finalizes the request exactly
once: it records metrics, runs the registered sinks and releases the
request id. Responses produced by a route handler are finalized only after
their body has been sent, so streamed responses are timed in full. A
failure raised while streaming happens after the status line is on the
wire; it is recorded with the status already sent.

The body is read chunk by chunk and the read stops as soon as the size
limit is passed; a declared ``Content-Length`` over the limit is rejected
without reading at all.

Usage:
    app.middleware("http")(RequestPipeline(rate_limiter=..., metrics=..., body_limit_bytes=...))
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, NoReturn

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

from mockai.adapters.rate_limit.base import AbstractRateLimiter, Clock
from mockai.core.errors import (
    MalformedBodyError,
    PayloadTooLargeError,
    PipelineError,
    RateLimitExceededError,
    RouteNotFoundError,
    UpstreamHandlerError,
)
from mockai.core.logging import ACCESS_LOGGER_NAME, clear_request_id, set_request_id
from mockai.core.metrics import MetricLabels, MetricsCollector

logger = logging.getLogger(__name__)
access_logger = logging.getLogger(ACCESS_LOGGER_NAME)

CallNext = Callable[[Request], Awaitable[Response]]
CompletionSink = Callable[["PipelineContext", float], None]
Stage = Callable[["PipelineContext", Request], Awaitable[None]]


@dataclass
class PipelineContext:
    """State carried through the pipeline for one request."""

    method: str
    path: str
    started_at: float
    request_id: str | None = None
    body: bytes = b""
    payload: Any = None
    terminated: bool = False
    status_code: int | None = None
    sinks: list[CompletionSink] = field(default_factory=list)

    @property
    def rate_limit_key(self) -> str | None:
        """The ``model`` declared by a JSON object body, if any."""
        if isinstance(self.payload, dict):
            model = self.payload.get("model")
            if isinstance(model, str) and model:
                return model
        return None


def _is_json(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def _declared_length(value: str | None) -> int | None:
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _matches_route(request: Request) -> bool:
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match is Match.FULL:
            return True
    return False


def _log_failed_request(ctx: PipelineContext, duration_ms: float) -> None:
    if ctx.status_code is None or ctx.status_code < 400:
        return
    access_logger.warning(
        "request.failed",
        extra={
            "request_id": ctx.request_id,
            "method": ctx.method,
            "path": ctx.path,
            "status": ctx.status_code,
            "duration_ms": round(duration_ms, 3),
        },
    )


def _log_completed_request(ctx: PipelineContext, duration_ms: float) -> None:
    if ctx.status_code is None or ctx.status_code >= 400:
        return
    access_logger.info(
        "request.completed",
        extra={
            "request_id": ctx.request_id,
            "method": ctx.method,
            "path": ctx.path,
            "status": ctx.status_code,
            "duration_ms": round(duration_ms, 3),
        },
    )


class RequestPipeline:
    """Ordered admission stages plus a single finalizer per request."""

    def __init__(
        self,
        *,
        rate_limiter: AbstractRateLimiter,
        metrics: MetricsCollector,
        body_limit_bytes: int,
        request_id_header: str = "X-Request-ID",
        include_rate_limit_headers: bool = False,
        unmetered_paths: Iterable[str] = ("/metrics",),
        clock: Clock = time.perf_counter,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._metrics = metrics
        self._body_limit_bytes = body_limit_bytes
        self._request_id_header = request_id_header
        self._include_rate_limit_headers = include_rate_limit_headers
        self._unmetered_paths = frozenset(unmetered_paths)
        self._clock = clock
        self._stages: tuple[Stage, ...] = (
            self._read_body,
            self._enforce_rate_limit,
            self._tag_request,
            self._register_access_log,
        )

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        ctx = PipelineContext(
            method=request.method,
            path=request.url.path,
            started_at=self._clock(),
        )

        try:
            response = await self._run(ctx, request, call_next)
        except PipelineError as exc:
            response = exc.to_response()
        except Exception as exc:
            logger.exception(
                "pipeline.handler_failed",
                extra={
                    "error_type": type(exc).__name__,
                    "method": ctx.method,
                    "path": ctx.path,
                },
            )
            response = UpstreamHandlerError(
                code="upstream_handler_error",
                message=str(exc),
            ).to_response()

        self._stamp_headers(ctx, response)

        # Dispatched responses are sent as a stream after this returns
        body_iterator = getattr(response, "body_iterator", None)
        if body_iterator is None:
            self._finalize(ctx, response.status_code)
        else:
            response.body_iterator = self._finalize_after_body(ctx, response.status_code, body_iterator)
        return response

    async def _run(self, ctx: PipelineContext, request: Request, call_next: CallNext) -> Response:
        for stage in self._stages:
            await stage(ctx, request)

        if not _matches_route(request):
            raise RouteNotFoundError(
                code="route_not_found",
                message=f"No route for {ctx.method} {ctx.path}",
            )

        return await call_next(request)

    async def _read_body(self, ctx: PipelineContext, request: Request) -> None:
        declared = _declared_length(request.headers.get("content-length"))
        if declared is not None and declared > self._body_limit_bytes:
            self._reject_oversized(declared)

        chunks: list[bytes] = []
        size = 0
        async for chunk in request.stream():
            chunks.append(chunk)
            size += len(chunk)
            if size > self._body_limit_bytes:
                ctx.body = b"".join(chunks)
                self._reject_oversized(size)

        ctx.body = b"".join(chunks)
        # Starlette replays a cached body to the downstream app
        request._body = ctx.body

        if ctx.body and _is_json(request.headers.get("content-type")):
            try:
                ctx.payload = json.loads(ctx.body)
            except ValueError as exc:
                raise MalformedBodyError(
                    code="malformed_json",
                    message="Request body is not valid JSON",
                ) from exc

    def _reject_oversized(self, size: int) -> NoReturn:
        logger.warning(
            "request.payload_too_large",
            extra={"size": size, "max_bytes": self._body_limit_bytes},
        )
        raise PayloadTooLargeError(
            code="payload_too_large",
            message="Request body exceeds the configured size limit",
            details={"max_value": self._body_limit_bytes, "actual_value": size},
        )

    async def _enforce_rate_limit(self, ctx: PipelineContext, request: Request) -> None:
        key = ctx.rate_limit_key
        result = self._rate_limiter.admit(key)
        if result.allowed:
            return

        logger.warning(
            "rate_limit.exceeded",
            extra={
                "model": key,
                "limit": result.limit,
                "retry_after_s": result.retry_after_seconds,
            },
        )

        headers: dict[str, str] = {}
        if self._include_rate_limit_headers:
            headers["Retry-After"] = str(result.retry_after_seconds or 0)
            headers["X-RateLimit-Limit"] = f"{result.limit:g}"
            headers["X-RateLimit-Remaining"] = str(result.remaining)

        raise RateLimitExceededError(
            code="rate_limit_exceeded",
            message=f"Rate limit exceeded for model {key}",
            details={"model": key, "retry_after": result.retry_after_seconds or 0},
            response_headers=headers,
        )

    async def _tag_request(self, ctx: PipelineContext, request: Request) -> None:
        ctx.request_id = request.headers.get(self._request_id_header) or str(uuid.uuid4())
        set_request_id(ctx.request_id)

    async def _register_access_log(self, ctx: PipelineContext, request: Request) -> None:
        ctx.sinks.append(_log_failed_request)
        ctx.sinks.append(_log_completed_request)

    def _stamp_headers(self, ctx: PipelineContext, response: Response) -> None:
        if ctx.request_id is None:
            return
        response.headers[self._request_id_header] = ctx.request_id
        response.headers.setdefault(
            "X-Request-Duration-ms",
            f"{(self._clock() - ctx.started_at) * 1000:.2f}",
        )

    async def _finalize_after_body(
        self,
        ctx: PipelineContext,
        status_code: int,
        body_iterator: AsyncIterator[bytes],
    ) -> AsyncIterator[bytes]:
        try:
            async for chunk in body_iterator:
                yield chunk
        finally:
            self._finalize(ctx, status_code)

    def _finalize(self, ctx: PipelineContext, status_code: int) -> None:
        if ctx.terminated:
            return
        ctx.terminated = True
        ctx.status_code = status_code
        duration_ms = (self._clock() - ctx.started_at) * 1000

        try:
            if ctx.path not in self._unmetered_paths:
                self._metrics.record(
                    MetricLabels(ctx.method, ctx.path, ctx.status_code),
                    duration_ms=duration_ms,
                    payload_bytes=len(ctx.body),
                )
            for sink in ctx.sinks:
                sink(ctx, duration_ms)
        finally:
            if ctx.request_id is not None:
                clear_request_id()

"""Application-level exception types.

This module defines the errors raised by route handlers and by the request
pipeline, enabling consistent error handling, logging, and API responses.
Pipeline errors render their own deterministic response so that every
terminal path of a request produces a fixed status and body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, NotRequired, TypedDict

from starlette.responses import JSONResponse, PlainTextResponse, Response


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    max_value: int
    actual_value: int
    http_status: int
    retry_after: float
    model: str
    param: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when a request to a mock endpoint is invalid."""


class NotFoundAppError(AppError):
    """Raised when a mock endpoint is asked for an unknown object."""


class PipelineError(AppError):
    """A request pipeline stage terminated the request.

    Subclasses fix the HTTP status and the response body.
    """

    status_code: ClassVar[int] = 500
    body: ClassVar[Any] = {"error": "Internal Server Error"}

    def headers(self) -> dict[str, str]:
        return {}

    def to_response(self) -> Response:
        return JSONResponse(
            status_code=self.status_code,
            content=self.body,
            headers=self.headers() or None,
        )


class PayloadTooLargeError(PipelineError):
    """Request body exceeds the configured size limit."""

    status_code = 413
    body = {"error": "Payload Too Large"}


class MalformedBodyError(PipelineError):
    """A JSON request body could not be decoded."""

    status_code = 400
    body = {"error": "Bad Request"}


class RateLimitExceededError(PipelineError):
    """The token bucket for the request's model is empty."""

    status_code = 429
    body = {"error": "Too Many Requests"}

    def __init__(
        self,
        code: str,
        message: str,
        details: ErrorDetails | None = None,
        response_headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(code=code, message=message, details=details)
        self._response_headers = response_headers or {}

    def headers(self) -> dict[str, str]:
        return dict(self._response_headers)


class RouteNotFoundError(PipelineError):
    """No mounted route matched the request."""

    status_code = 404
    body = "Page not found"

    def to_response(self) -> Response:
        return PlainTextResponse(self.body, status_code=self.status_code)


class UpstreamHandlerError(PipelineError):
    """A route handler failed unexpectedly."""

    status_code = 500
    body = {"error": "Internal Server Error"}

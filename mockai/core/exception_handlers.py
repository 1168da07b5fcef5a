"""Global exception handlers for consistent error responses.

Design:
- PipelineError subclasses → their own fixed status and body
- ValidationAppError → 400, NotFoundAppError → 404 (JSON error envelope)
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from mockai.core.errors import AppError, NotFoundAppError, PipelineError
from mockai.core.logging import get_request_id

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> Response:
    """Handle application errors raised inside route handlers.

    Routes errors to HTTP status codes:
    - PipelineError → the status and body fixed by the error class
    - NotFoundAppError → 404 Not Found
    - anything else (ValidationAppError) → 400 Bad Request

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        Response with appropriate status code and error details.
    """
    if isinstance(exc, PipelineError):
        return exc.to_response()

    status_code = 400
    if isinstance(exc, NotFoundAppError):
        status_code = 404

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the failure and returns a generic message without leaking details.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)

from __future__ import annotations

import time

from fastapi import APIRouter, Query

from mockai.core.errors import ValidationAppError
from mockai.schemas.requests import BatchRequest
from mockai.utils.ids import generate_id

router = APIRouter(prefix="/v1/batches", tags=["Batch"])

SUPPORTED_ENDPOINTS = ("/v1/chat/completions", "/v1/completions", "/v1/embeddings", "/v1/responses")


def _batch(batch_id: str, *, status: str = "validating", endpoint: str = "/v1/chat/completions", input_file_id: str | None = None, metadata: dict | None = None) -> dict:
    now = int(time.time())
    return {
        "id": batch_id,
        "object": "batch",
        "endpoint": endpoint,
        "errors": None,
        "input_file_id": input_file_id or generate_id("file"),
        "completion_window": "24h",
        "status": status,
        "output_file_id": None,
        "error_file_id": None,
        "created_at": now,
        "in_progress_at": None,
        "expires_at": now + 24 * 3600,
        "completed_at": None,
        "cancelled_at": now if status == "cancelled" else None,
        "request_counts": {"total": 0, "completed": 0, "failed": 0},
        "metadata": metadata,
    }


@router.post("")
def create_batch(body: BatchRequest) -> dict:
    if body.endpoint not in SUPPORTED_ENDPOINTS:
        raise ValidationAppError(
            code="invalid_endpoint",
            message=f"Unsupported batch endpoint {body.endpoint!r}",
            details={"param": "endpoint"},
        )
    return _batch(
        generate_id("batch"),
        endpoint=body.endpoint,
        input_file_id=body.input_file_id,
        metadata=body.metadata,
    )


@router.get("")
def list_batches(limit: int = Query(20, ge=1, le=100)) -> dict:
    batches = [_batch(generate_id("batch"), status="completed") for _ in range(min(limit, 3))]
    return {
        "object": "list",
        "data": batches,
        "first_id": batches[0]["id"],
        "last_id": batches[-1]["id"],
        "has_more": False,
    }


@router.get("/{batch_id}")
def retrieve_batch(batch_id: str) -> dict:
    return _batch(batch_id, status="in_progress")


@router.post("/{batch_id}/cancel")
def cancel_batch(batch_id: str) -> dict:
    return _batch(batch_id, status="cancelled")

from __future__ import annotations

import time

from fastapi import APIRouter, File, UploadFile

from mockai.schemas.requests import CompleteUploadRequest, UploadRequest
from mockai.utils.ids import generate_id

router = APIRouter(prefix="/v1/uploads", tags=["Uploads"])

UPLOAD_TTL_SECONDS = 3600


def _upload(upload_id: str, *, status: str, filename: str = "mock.jsonl", purpose: str = "fine-tune", size: int = 0, file: dict | None = None) -> dict:
    now = int(time.time())
    return {
        "id": upload_id,
        "object": "upload",
        "bytes": size,
        "created_at": now,
        "filename": filename,
        "purpose": purpose,
        "status": status,
        "expires_at": now + UPLOAD_TTL_SECONDS,
        "file": file,
    }


@router.post("")
def create_upload(body: UploadRequest) -> dict:
    return _upload(
        generate_id("upload"),
        status="pending",
        filename=body.filename,
        purpose=body.purpose,
        size=body.bytes,
    )


@router.post("/{upload_id}/parts")
async def add_upload_part(upload_id: str, data: UploadFile = File(...)) -> dict:
    await data.read()
    return {
        "id": generate_id("part"),
        "object": "upload.part",
        "created_at": int(time.time()),
        "upload_id": upload_id,
    }


@router.post("/{upload_id}/complete")
def complete_upload(upload_id: str, body: CompleteUploadRequest) -> dict:
    file = {
        "id": generate_id("file"),
        "object": "file",
        "bytes": 0,
        "created_at": int(time.time()),
        "filename": "mock.jsonl",
        "purpose": "fine-tune",
    }
    return _upload(upload_id, status="completed", file=file)


@router.post("/{upload_id}/cancel")
def cancel_upload(upload_id: str) -> dict:
    return _upload(upload_id, status="cancelled")

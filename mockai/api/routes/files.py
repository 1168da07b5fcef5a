from __future__ import annotations

import time

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import PlainTextResponse

from mockai.api.deps import get_content
from mockai.services.content import RandomContent
from mockai.utils.ids import generate_id

router = APIRouter(prefix="/v1/files", tags=["Files"])


def _file(file_id: str, *, filename: str = "mock.jsonl", purpose: str = "fine-tune", size: int = 0) -> dict:
    return {
        "id": file_id,
        "object": "file",
        "bytes": size,
        "created_at": int(time.time()),
        "filename": filename,
        "purpose": purpose,
    }


@router.post("")
async def upload_file(
    file: UploadFile = File(...),
    purpose: str = Form(...),
) -> dict:
    data = await file.read()
    return _file(
        generate_id("file"),
        filename=file.filename or "upload",
        purpose=purpose,
        size=len(data),
    )


@router.get("")
def list_files(purpose: str | None = None) -> dict:
    files = [_file(generate_id("file"), purpose=purpose or "fine-tune", size=1024) for _ in range(2)]
    return {"object": "list", "data": files, "has_more": False}


@router.get("/{file_id}")
def retrieve_file(file_id: str) -> dict:
    return _file(file_id, size=1024)


@router.delete("/{file_id}")
def delete_file(file_id: str) -> dict:
    return {"id": file_id, "object": "file", "deleted": True}


@router.get("/{file_id}/content", response_class=PlainTextResponse)
def retrieve_file_content(
    file_id: str,
    content: RandomContent = Depends(get_content),
) -> str:
    return "\n".join(content.sentence() for _ in range(3))

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import PlainTextResponse, Response

from mockai.api.deps import get_content
from mockai.schemas.requests import SpeechRequest
from mockai.services.content import RandomContent

router = APIRouter(tags=["Audio"])

_AUDIO_MEDIA_TYPES = {
    "mp3": "audio/mpeg",
    "opus": "audio/opus",
    "aac": "audio/aac",
    "flac": "audio/flac",
    "wav": "audio/wav",
    "pcm": "audio/pcm",
}

# MPEG frame header followed by silence
_SILENT_FRAME = b"\xff\xfb\x90\x64" + b"\x00" * 413


@router.post("/v1/audio/speech")
def create_speech(body: SpeechRequest) -> Response:
    """Return a short silent clip, one frame per word of input."""

    frames = max(1, len(body.input.split()))
    media_type = _AUDIO_MEDIA_TYPES.get(body.response_format, "application/octet-stream")
    return Response(content=_SILENT_FRAME * frames, media_type=media_type)


def _transcript(text: str, response_format: str):
    if response_format in ("text", "srt", "vtt"):
        return PlainTextResponse(text)
    return {"text": text}


@router.post("/v1/audio/transcriptions")
async def create_transcription(
    file: UploadFile = File(...),
    model: str = Form(...),
    response_format: str = Form("json"),
    content: RandomContent = Depends(get_content),
):
    await file.read()
    return _transcript(content.paragraph(), response_format)


@router.post("/v1/audio/translations")
async def create_translation(
    file: UploadFile = File(...),
    model: str = Form(...),
    response_format: str = Form("json"),
    content: RandomContent = Depends(get_content),
):
    await file.read()
    return _transcript(content.paragraph(), response_format)

from __future__ import annotations

from fastapi import APIRouter

from mockai.core.errors import NotFoundAppError

router = APIRouter(tags=["Models"])

# Created timestamps are fixed so listings are stable across calls
MODELS: dict[str, dict] = {
    model_id: {"id": model_id, "object": "model", "created": created, "owned_by": owner}
    for model_id, created, owner in (
        ("gpt-4o", 1715367049, "system"),
        ("gpt-4o-mini", 1721172741, "system"),
        ("gpt-4-turbo", 1712361441, "system"),
        ("gpt-3.5-turbo", 1677610602, "openai"),
        ("gpt-3.5-turbo-instruct", 1692901427, "system"),
        ("text-embedding-3-small", 1705948997, "system"),
        ("text-embedding-3-large", 1705953180, "system"),
        ("text-embedding-ada-002", 1671217299, "openai-internal"),
        ("dall-e-2", 1698798177, "system"),
        ("dall-e-3", 1698785189, "system"),
        ("tts-1", 1681940951, "openai-internal"),
        ("whisper-1", 1677532384, "openai-internal"),
        ("omni-moderation-latest", 1731689265, "system"),
    )
}


@router.get("/v1/models")
def list_models() -> dict:
    return {"object": "list", "data": list(MODELS.values())}


@router.get("/v1/models/{model_id}")
def retrieve_model(model_id: str) -> dict:
    try:
        return MODELS[model_id]
    except KeyError:
        raise NotFoundAppError(
            code="model_not_found",
            message=f"The model '{model_id}' does not exist",
            details={"model": model_id},
        ) from None

from __future__ import annotations

from fastapi import APIRouter

from mockai.schemas.requests import ModerationRequest
from mockai.utils.ids import generate_id

router = APIRouter(tags=["Moderations"])

CATEGORIES = (
    "harassment",
    "harassment/threatening",
    "hate",
    "hate/threatening",
    "illicit",
    "illicit/violent",
    "self-harm",
    "self-harm/intent",
    "self-harm/instructions",
    "sexual",
    "sexual/minors",
    "violence",
    "violence/graphic",
)


@router.post("/v1/moderations")
def create_moderation(body: ModerationRequest) -> dict:
    """Flag nothing: every input is reported as safe."""

    inputs = body.input if isinstance(body.input, list) else [body.input]
    results = [
        {
            "flagged": False,
            "categories": {category: False for category in CATEGORIES},
            "category_scores": {category: 0.0 for category in CATEGORIES},
        }
        for _ in inputs
    ]
    return {"id": generate_id("modr"), "model": body.model, "results": results}

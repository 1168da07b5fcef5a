from __future__ import annotations

import base64
import time

from fastapi import APIRouter

from mockai.core.errors import ValidationAppError
from mockai.schemas.requests import ImageGenerationRequest
from mockai.utils.ids import generate_id

router = APIRouter(tags=["Images"])

# 1x1 transparent PNG
_PLACEHOLDER_PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def _parse_size(size: str) -> tuple[int, int]:
    try:
        width, height = (int(part) for part in size.lower().split("x", 1))
    except ValueError:
        raise ValidationAppError(
            code="invalid_size",
            message=f"Invalid image size {size!r}, expected WIDTHxHEIGHT",
            details={"param": "size"},
        ) from None
    return width, height


@router.post("/v1/images/generations")
def create_image(body: ImageGenerationRequest) -> dict:
    """Return placeholder images for the requested prompt."""

    width, height = _parse_size(body.size)

    data = []
    for _ in range(body.n):
        if body.response_format == "b64_json":
            data.append({"b64_json": base64.b64encode(_PLACEHOLDER_PNG).decode("ascii")})
        else:
            data.append(
                {
                    "url": f"https://placehold.co/{width}x{height}/png?text={generate_id('img', 8)}",
                    "revised_prompt": body.prompt,
                }
            )

    return {"created": int(time.time()), "data": data}

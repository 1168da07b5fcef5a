from __future__ import annotations

import base64
import struct

from fastapi import APIRouter, Depends

from mockai.api.deps import get_content
from mockai.schemas.requests import EmbeddingRequest
from mockai.services.content import RandomContent, count_tokens

router = APIRouter(tags=["Embeddings"])

DEFAULT_DIMENSIONS = 1536


def _inputs(body: EmbeddingRequest) -> list:
    # A flat list of ints is a single pre-tokenized input
    if isinstance(body.input, list) and body.input and not isinstance(body.input[0], (str, list)):
        return [body.input]
    if isinstance(body.input, list):
        return list(body.input)
    return [body.input]


def _token_count(item) -> int:
    return count_tokens(item) if isinstance(item, str) else len(item)


@router.post("/v1/embeddings")
def create_embeddings(
    body: EmbeddingRequest,
    content: RandomContent = Depends(get_content),
) -> dict:
    """Return one random vector per input."""

    dimensions = body.dimensions or DEFAULT_DIMENSIONS
    inputs = _inputs(body)

    data = []
    for index, _ in enumerate(inputs):
        vector = [content.random_float() for _ in range(dimensions)]
        if body.encoding_format == "base64":
            embedding = base64.b64encode(struct.pack(f"<{dimensions}f", *vector)).decode("ascii")
        else:
            embedding = vector
        data.append({"object": "embedding", "index": index, "embedding": embedding})

    prompt_tokens = sum(_token_count(item) for item in inputs)
    return {
        "object": "list",
        "data": data,
        "model": body.model,
        "usage": {"prompt_tokens": prompt_tokens, "total_tokens": prompt_tokens},
    }

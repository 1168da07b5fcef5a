from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from mockai.api.deps import get_content
from mockai.schemas.requests import CompletionRequest
from mockai.services.content import RandomContent, count_tokens
from mockai.utils.ids import generate_id

router = APIRouter(tags=["Completions"])


@router.post("/v1/completions")
def create_completion(
    body: CompletionRequest,
    content: RandomContent = Depends(get_content),
) -> dict:
    """Legacy text completion with random text."""

    prompts = body.prompt if isinstance(body.prompt, list) else [body.prompt]
    prompt_tokens = sum(count_tokens(p) for p in prompts)

    choices = []
    completion_tokens = 0
    for prompt in prompts:
        for _ in range(body.n):
            text = content.paragraph(body.max_tokens)
            completion_tokens += count_tokens(text)
            choices.append(
                {
                    "index": len(choices),
                    "text": f"{prompt}{text}" if body.echo else text,
                    "logprobs": None,
                    "finish_reason": "stop",
                }
            )

    return {
        "id": generate_id("cmpl"),
        "object": "text_completion",
        "created": int(time.time()),
        "model": body.model,
        "choices": choices,
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }

from __future__ import annotations

import json
import time
from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from mockai.api.deps import get_content
from mockai.schemas.requests import ChatCompletionRequest
from mockai.services.content import RandomContent, count_tokens
from mockai.utils.ids import generate_id

router = APIRouter(tags=["Chat"])


def _prompt_tokens(body: ChatCompletionRequest) -> int:
    total = 0
    for message in body.messages:
        if isinstance(message.content, str):
            total += count_tokens(message.content)
        elif isinstance(message.content, list):
            total += sum(
                count_tokens(part.get("text", ""))
                for part in message.content
                if isinstance(part.get("text"), str)
            )
    return total


def _stream_chunks(completion_id: str, created: int, model: str, text: str) -> Iterator[str]:
    def chunk(delta: dict, finish_reason: str | None = None) -> str:
        payload = {
            "id": completion_id,
            "object": "chat.completion.chunk",
            "created": created,
            "model": model,
            "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
        }
        return f"data: {json.dumps(payload)}\n\n"

    yield chunk({"role": "assistant", "content": ""})
    for word in text.split(" "):
        yield chunk({"content": word + " "})
    yield chunk({}, finish_reason="stop")
    yield "data: [DONE]\n\n"


@router.post("/v1/chat/completions")
def create_chat_completion(
    body: ChatCompletionRequest,
    content: RandomContent = Depends(get_content),
):
    """Answer a chat completion with random text, optionally as an SSE stream."""

    completion_id = generate_id("chatcmpl")
    created = int(time.time())

    if body.stream:
        text = content.paragraph(body.token_budget)
        return StreamingResponse(
            _stream_chunks(completion_id, created, body.model, text),
            media_type="text/event-stream",
        )

    choices = []
    completion_tokens = 0
    for index in range(body.n):
        text = content.paragraph(body.token_budget)
        completion_tokens += count_tokens(text)
        choices.append(
            {
                "index": index,
                "message": {"role": "assistant", "content": text},
                "logprobs": None,
                "finish_reason": "stop",
            }
        )

    prompt_tokens = _prompt_tokens(body)
    return {
        "id": completion_id,
        "object": "chat.completion",
        "created": created,
        "model": body.model,
        "choices": choices,
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }

"""Request bodies accepted by the mock OpenAI-style endpoints.

Models are lenient: unknown fields are accepted and ignored, since clients
under test often send parameters the mock does not care about.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow")


class ChatMessage(_Lenient):
    role: str
    content: str | list[dict[str, Any]] | None = None


class ChatCompletionRequest(_Lenient):
    model: str
    messages: list[ChatMessage] = Field(..., min_length=1)
    n: int = Field(1, ge=1, le=16)
    stream: bool = False
    max_tokens: int | None = Field(None, ge=1)
    max_completion_tokens: int | None = Field(None, ge=1)

    @property
    def token_budget(self) -> int | None:
        return self.max_completion_tokens or self.max_tokens


class CompletionRequest(_Lenient):
    model: str
    prompt: str | list[str] = ""
    n: int = Field(1, ge=1, le=16)
    max_tokens: int | None = Field(None, ge=1)
    echo: bool = False


class ImageGenerationRequest(_Lenient):
    prompt: str
    model: str = "dall-e-2"
    n: int = Field(1, ge=1, le=10)
    size: str = "1024x1024"
    response_format: Literal["url", "b64_json"] = "url"


class EmbeddingRequest(_Lenient):
    model: str
    input: str | list[str] | list[int] | list[list[int]]
    dimensions: int | None = Field(None, ge=1, le=8192)
    encoding_format: Literal["float", "base64"] = "float"


class ModerationRequest(_Lenient):
    input: str | list[str] | list[dict[str, Any]]
    model: str = "omni-moderation-latest"


class SpeechRequest(_Lenient):
    model: str
    input: str
    voice: str
    response_format: str = "mp3"


class FineTuningJobRequest(_Lenient):
    model: str
    training_file: str
    validation_file: str | None = None
    hyperparameters: dict[str, Any] | None = None
    suffix: str | None = None


class BatchRequest(_Lenient):
    input_file_id: str
    endpoint: str
    completion_window: str = "24h"
    metadata: dict[str, str] | None = None


class UploadRequest(_Lenient):
    filename: str
    purpose: str
    bytes: int = Field(..., ge=0)
    mime_type: str


class CompleteUploadRequest(_Lenient):
    part_ids: list[str] = Field(..., min_length=1)
    md5: str | None = None

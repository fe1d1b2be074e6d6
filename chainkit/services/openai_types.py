"""Pydantic schemas for OpenAI request payloads and responses.

Only the fields chainkit reads are declared; everything else the API sends
is ignored.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError

from chainkit.errors import OpenAIServerError


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


# ── Chat completions ────────────────────────────────────────────────


class ChatMessagePayload(BaseModel):
    role: str
    content: str | None = None


class ChatCompletionRequest(BaseModel):
    model: str
    messages: list[ChatMessagePayload]
    temperature: float = 0.0
    max_tokens: int | None = None
    stop: list[str] | None = None


class ChatChoice(BaseModel):
    index: int = 0
    message: ChatMessagePayload
    finish_reason: str | None = None


class ChatCompletionResponse(BaseModel):
    id: str = ""
    model: str = ""
    choices: list[ChatChoice] = Field(default_factory=list)
    usage: Usage | None = None


class ChunkDelta(BaseModel):
    role: str | None = None
    content: str | None = None


class ChunkChoice(BaseModel):
    index: int = 0
    delta: ChunkDelta | None = None
    finish_reason: str | None = None


class ChatCompletionChunk(BaseModel):
    """One ``data:`` event of a streamed chat completion."""

    id: str = ""
    model: str = ""
    choices: list[ChunkChoice] = Field(default_factory=list)


# ── Text completions ────────────────────────────────────────────────


class CompletionRequest(BaseModel):
    model: str
    prompt: str
    temperature: float = 0.0
    max_tokens: int | None = None
    stop: list[str] | None = None


class CompletionChoice(BaseModel):
    index: int = 0
    text: str
    finish_reason: str | None = None


class CompletionResponse(BaseModel):
    choices: list[CompletionChoice] = Field(default_factory=list)
    usage: Usage | None = None


# ── Embeddings ──────────────────────────────────────────────────────


class EmbeddingRequest(BaseModel):
    model: str
    input: str | list[str]


class EmbeddingData(BaseModel):
    index: int
    embedding: list[float]


class EmbeddingResponse(BaseModel):
    data: list[EmbeddingData] = Field(default_factory=list)
    model: str = ""
    usage: Usage | None = None

    def extract_all_embeddings(self) -> list[list[float]]:
        return [d.embedding for d in sorted(self.data, key=lambda d: d.index)]

    def extract_embedding(self) -> list[float]:
        if not self.data:
            raise OpenAIServerError(500, "No embedding returned")
        return self.extract_all_embeddings()[0]


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_response(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate *data* against *model*, mapping failures to ``OpenAIServerError``."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise OpenAIServerError(500, f"Could not parse response: {exc.error_count()} validation errors") from exc


def to_payload(request: BaseModel) -> dict[str, Any]:
    """Serialise a request model, leaving out unset optional fields."""
    return request.model_dump(exclude_none=True)

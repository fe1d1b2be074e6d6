"""OpenAI chat completions model."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from enum import Enum

from chainkit import config
from chainkit.chat_models.base import BaseChatModel, MessagesInput, flatten_messages
from chainkit.errors import OpenAIServerError
from chainkit.schemas.messages import AIMessage, to_openai_message
from chainkit.services.openai_client import OpenAIClient
from chainkit.services.openai_types import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessagePayload,
    parse_response,
    to_payload,
)

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/chat/completions"


class ChatModel(str, Enum):
    GPT_3_5_TURBO = "gpt-3.5-turbo"
    GPT_3_5_TURBO_16K = "gpt-3.5-turbo-16k"
    GPT_4 = "gpt-4"
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"


def _model_name(model: ChatModel | str) -> str:
    return model.value if isinstance(model, ChatModel) else model


def _stop_list(stop: str | Sequence[str] | None) -> list[str] | None:
    if stop is None:
        return None
    if isinstance(stop, str):
        return [stop]
    return list(stop)


class ChatOpenAI(BaseChatModel):
    """Chat model backed by ``POST /chat/completions``.

    The HTTP client is created on first use, so constructing a model never
    requires credentials.
    """

    def __init__(
        self,
        model: ChatModel | str | None = None,
        temperature: float = 0.0,
        api_key: str | None = None,
        *,
        max_tokens: int | None = None,
        stop: str | Sequence[str] | None = None,
        client: OpenAIClient | None = None,
    ) -> None:
        self.model = _model_name(model or config.OPENAI_CHAT_MODEL)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.stop = _stop_list(stop)
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> OpenAIClient:
        if self._client is None:
            self._client = OpenAIClient(api_key=self._api_key)
        return self._client

    # Builder-style setters, handy when configuring from CLI flags

    def with_model(self, model: ChatModel | str) -> ChatOpenAI:
        self.model = _model_name(model)
        return self

    def with_temperature(self, temperature: float) -> ChatOpenAI:
        self.temperature = temperature
        return self

    def with_api_key(self, api_key: str) -> ChatOpenAI:
        self._api_key = api_key
        self._client = None
        return self

    # ── Request / response shaping ───────────────────────────────────

    def _build_payload(self, messages: MessagesInput) -> dict:
        request = ChatCompletionRequest(
            model=self.model,
            messages=[ChatMessagePayload(**to_openai_message(m)) for m in flatten_messages(messages)],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            stop=self.stop,
        )
        return to_payload(request)

    @staticmethod
    def _parse(data: dict) -> AIMessage:
        response = parse_response(ChatCompletionResponse, data)
        if not response.choices:
            raise OpenAIServerError(500, "Unexpected API response")
        content = response.choices[0].message.content
        if content is None:
            raise OpenAIServerError(500, "No content in AI message")
        if response.usage is not None:
            logger.debug(
                "%s usage: prompt=%d completion=%d",
                response.model or "chat model", response.usage.prompt_tokens, response.usage.completion_tokens,
            )
        return AIMessage(content=content)

    # ── BaseChatModel ────────────────────────────────────────────────

    def generate(self, messages: MessagesInput) -> AIMessage:
        data = self.client.post(CHAT_COMPLETIONS_PATH, self._build_payload(messages))
        return self._parse(data)

    async def agenerate(self, messages: MessagesInput) -> AIMessage:
        data = await self.client.apost(CHAT_COMPLETIONS_PATH, self._build_payload(messages))
        return self._parse(data)

    async def astream(self, messages: MessagesInput) -> AsyncIterator[str]:
        async for payload in self.client.astream(CHAT_COMPLETIONS_PATH, self._build_payload(messages)):
            chunk = parse_response(ChatCompletionChunk, payload)
            for choice in chunk.choices:
                if choice.delta is not None and choice.delta.content:
                    yield choice.delta.content

    async def aclose(self) -> None:
        """Close the HTTP connection pools, if any were opened."""
        if self._client is not None:
            self._client.close()
            await self._client.aclose()

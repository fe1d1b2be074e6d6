"""OpenAI text completions model (``POST /completions``)."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from chainkit import config
from chainkit.errors import GenericOpenAIError
from chainkit.llm.base import BaseLLM
from chainkit.services.openai_client import OpenAIClient
from chainkit.services.openai_types import (
    CompletionRequest,
    CompletionResponse,
    parse_response,
    to_payload,
)

COMPLETIONS_PATH = "/completions"


class LLMModel(str, Enum):
    GPT_3_5_TURBO_INSTRUCT = "gpt-3.5-turbo-instruct"
    DAVINCI_002 = "davinci-002"
    BABBAGE_002 = "babbage-002"


class OpenAI(BaseLLM):
    def __init__(
        self,
        model: LLMModel | str | None = None,
        temperature: float = 0.0,
        api_key: str | None = None,
        *,
        stop: str | Sequence[str] | None = None,
        max_tokens: int | None = None,
        client: OpenAIClient | None = None,
    ) -> None:
        model = model or config.OPENAI_COMPLETION_MODEL
        self.model = model.value if isinstance(model, LLMModel) else model
        self.temperature = temperature
        self.stop = [stop] if isinstance(stop, str) else (list(stop) if stop else None)
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> OpenAIClient:
        if self._client is None:
            self._client = OpenAIClient(api_key=self._api_key)
        return self._client

    def with_stop_sequence(self, stop: str) -> OpenAI:
        self.stop = [stop]
        return self

    def _build_payload(self, prompt: str) -> dict:
        return to_payload(
            CompletionRequest(
                model=self.model,
                prompt=prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stop=self.stop,
            )
        )

    @staticmethod
    def _parse(data: dict) -> str:
        response = parse_response(CompletionResponse, data)
        if not response.choices:
            raise GenericOpenAIError("No choices returned")
        return response.choices[0].text

    def generate(self, prompt: str) -> str:
        return self._parse(self.client.post(COMPLETIONS_PATH, self._build_payload(prompt)))

    async def agenerate(self, prompt: str) -> str:
        return self._parse(await self.client.apost(COMPLETIONS_PATH, self._build_payload(prompt)))

"""Shared test fixtures for the chainkit test suite."""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest

from chainkit.chat_models.base import BaseChatModel, MessagesInput, flatten_messages
from chainkit.schemas.messages import AIMessage


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    Credentials are resolved lazily, so this is early enough for every client.
    """
    os.environ.setdefault("OPENAI_API_KEY", "test-openai-key-123")
    os.environ.setdefault("METRICS_ENABLED", "false")


class FakeChatModel(BaseChatModel):
    """Replays canned replies in order and records every prompt it was sent."""

    def __init__(self, replies: list[str]) -> None:
        self.replies = list(replies)
        self.calls: list[list] = []

    def _next(self, messages: MessagesInput) -> AIMessage:
        self.calls.append(flatten_messages(messages))
        if not self.replies:
            raise AssertionError("FakeChatModel ran out of replies")
        return AIMessage(content=self.replies.pop(0))

    def generate(self, messages: MessagesInput) -> AIMessage:
        return self._next(messages)

    async def agenerate(self, messages: MessagesInput) -> AIMessage:
        return self._next(messages)


@pytest.fixture
def fake_chat_model():
    """Factory fixture: ``fake_chat_model(["reply 1", "reply 2"])``."""
    return FakeChatModel


@pytest.fixture
def mock_http_response():
    """Factory fixture for creating mock httpx responses."""

    def _make(data: dict, status_code: int = 200):
        mock = MagicMock()
        mock.status_code = status_code
        mock.json.return_value = data
        mock.text = str(data)
        return mock

    return _make

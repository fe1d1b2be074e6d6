"""Tests for messages, prompt values, memory and the error hierarchy."""

from __future__ import annotations

import pytest

from chainkit.errors import (
    AWSServerError,
    EngineOverloadedError,
    IncorrectApiKeyError,
    InvalidAuthenticationError,
    MalformedUriError,
    NoOrganizationMembershipError,
    QuotaExceededError,
    RateLimitExceededError,
    UnknownOpenAIError,
    openai_error_from_status,
)
from chainkit.schemas.memory import SimpleMemory, WindowBufferMemory
from chainkit.schemas.messages import (
    AIMessage,
    HumanMessage,
    MessageType,
    SystemMessage,
    message_from_dict,
    messages_from_dicts,
    messages_to_dicts,
    to_openai_message,
)
from chainkit.schemas.prompt import ChatPromptValue, StringPromptValue

# ── Messages ─────────────────────────────────────────────────────────


class TestMessages:
    def test_message_types(self):
        assert HumanMessage("hi").type is MessageType.USER
        assert SystemMessage("rules").type is MessageType.SYSTEM
        assert AIMessage("hello").type is MessageType.ASSISTANT

    def test_dict_round_trip_preserves_class(self):
        original = [SystemMessage("be brief"), HumanMessage("hi"), AIMessage("hello")]
        restored = messages_from_dicts(messages_to_dicts(original))
        assert restored == original
        assert isinstance(restored[2], AIMessage)

    def test_from_dict_without_type_raises(self):
        with pytest.raises(ValueError, match="No type key"):
            message_from_dict({"content": "hi"})

    def test_from_dict_with_unknown_type_raises(self):
        with pytest.raises(ValueError, match="unexpected message type: tool"):
            message_from_dict({"type": "tool", "content": "hi"})

    def test_openai_shape_uses_role(self):
        assert to_openai_message(AIMessage("ok")) == {"role": "assistant", "content": "ok"}


class TestPromptValues:
    def test_string_value_as_messages(self):
        value = StringPromptValue("What is 2+2?")
        assert value.to_string() == "What is 2+2?"
        assert value.to_chat_messages() == [HumanMessage("What is 2+2?")]

    def test_chat_value_to_string(self):
        value = ChatPromptValue([SystemMessage("be brief"), HumanMessage("hi")])
        assert value.to_string() == "system:be brief\nuser:hi\n"


# ── Memory ───────────────────────────────────────────────────────────


class TestSimpleMemory:
    def test_add_and_read_messages(self):
        memory = SimpleMemory()
        memory.add_user_message("hi")
        memory.add_ai_message("hello")
        assert memory.messages() == [HumanMessage("hi"), AIMessage("hello")]

    def test_messages_returns_a_copy(self):
        memory = SimpleMemory()
        memory.add_user_message("hi")
        memory.messages().clear()
        assert len(memory.messages()) == 1

    def test_clear(self):
        memory = SimpleMemory([HumanMessage("hi")])
        memory.clear()
        assert memory.messages() == []


class TestWindowBufferMemory:
    def test_keeps_only_most_recent_messages(self):
        memory = WindowBufferMemory(window_size=2)
        memory.add_user_message("one")
        memory.add_ai_message("two")
        memory.add_user_message("three")
        assert [m.content for m in memory.messages()] == ["two", "three"]

    def test_rejects_non_positive_window(self):
        with pytest.raises(ValueError):
            WindowBufferMemory(window_size=0)


# ── Errors ───────────────────────────────────────────────────────────


class TestOpenAIErrorMapping:
    @pytest.mark.parametrize(
        ("code", "detail", "expected"),
        [
            (401, "Incorrect API key provided: sk-...", IncorrectApiKeyError),
            (401, "You must be a member of an organization to use the API", NoOrganizationMembershipError),
            (401, "bad token", InvalidAuthenticationError),
            (429, "You exceeded your current quota", QuotaExceededError),
            (429, "Rate limit reached", RateLimitExceededError),
            (503, "overloaded", EngineOverloadedError),
            (418, "teapot", UnknownOpenAIError),
        ],
    )
    def test_maps_status_and_body(self, code, detail, expected):
        error = openai_error_from_status(code, detail)
        assert type(error) is expected
        assert error.status_code == code

    def test_message_format(self):
        error = openai_error_from_status(429, "slow down")
        assert str(error) == "Error code 429: Rate limit reached for requests - slow down"


class TestAWSErrors:
    def test_message_includes_summary(self):
        assert str(MalformedUriError("Malformed Bucket URI")) == "Error: Malformed URI - Malformed Bucket URI"
        assert str(AWSServerError("boom")) == "Error: Server Error - boom"

"""Chat message types and their dict / OpenAI wire representations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class MessageType(str, Enum):
    USER = "user"
    SYSTEM = "system"
    ASSISTANT = "assistant"


@dataclass
class BaseMessage:
    """A single message in a conversation."""

    content: str
    type: MessageType = MessageType.USER


@dataclass
class HumanMessage(BaseMessage):
    type: MessageType = MessageType.USER


@dataclass
class SystemMessage(BaseMessage):
    type: MessageType = MessageType.SYSTEM


@dataclass
class AIMessage(BaseMessage):
    type: MessageType = MessageType.ASSISTANT


_MESSAGE_CLASSES: dict[str, type[BaseMessage]] = {
    MessageType.USER.value: HumanMessage,
    MessageType.SYSTEM.value: SystemMessage,
    MessageType.ASSISTANT.value: AIMessage,
}


def message_to_dict(message: BaseMessage) -> dict[str, str]:
    return {"type": message.type.value, "content": message.content}


def messages_to_dicts(messages: Iterable[BaseMessage]) -> list[dict[str, str]]:
    return [message_to_dict(m) for m in messages]


def message_from_dict(data: dict[str, Any]) -> BaseMessage:
    """Build a message from ``{"type": ..., "content": ...}``.

    Raises ``ValueError`` when ``type`` is missing or not a known message type.
    """
    message_type = data.get("type")
    if message_type is None:
        raise ValueError("No type key on map")
    cls = _MESSAGE_CLASSES.get(str(message_type))
    if cls is None:
        raise ValueError(f"Got unexpected message type: {message_type}")
    return cls(content=str(data.get("content", "")))


def messages_from_dicts(data: Iterable[dict[str, Any]]) -> list[BaseMessage]:
    return [message_from_dict(d) for d in data]


def to_openai_message(message: BaseMessage) -> dict[str, str]:
    """Return the ``{"role", "content"}`` shape the chat completions API expects."""
    return {"role": message.type.value, "content": message.content}

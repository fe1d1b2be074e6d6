"""Rendered prompt values: the output of a template, usable as text or messages."""

from __future__ import annotations

from abc import ABC, abstractmethod

from chainkit.schemas.messages import BaseMessage, HumanMessage


class PromptValue(ABC):
    @abstractmethod
    def to_string(self) -> str:
        ...

    @abstractmethod
    def to_chat_messages(self) -> list[BaseMessage]:
        ...


class StringPromptValue(PromptValue):
    """A plain rendered string; as chat input it becomes one human message."""

    def __init__(self, text: str):
        self.text = text

    def to_string(self) -> str:
        return self.text

    def to_chat_messages(self) -> list[BaseMessage]:
        return [HumanMessage(content=self.text)]

    def __repr__(self) -> str:
        return f"StringPromptValue(text={self.text!r})"


class ChatPromptValue(PromptValue):
    """A rendered list of messages; as text each line is ``type:content``."""

    def __init__(self, messages: list[BaseMessage]):
        self.messages = list(messages)

    def to_string(self) -> str:
        return "".join(f"{m.type.value}:{m.content}\n" for m in self.messages)

    def to_chat_messages(self) -> list[BaseMessage]:
        return list(self.messages)

    def __repr__(self) -> str:
        return f"ChatPromptValue(messages={self.messages!r})"

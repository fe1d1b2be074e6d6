"""Conversation memory: message histories shared by chains and the agent loop."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from chainkit.schemas.messages import AIMessage, BaseMessage, HumanMessage


class BaseChatMessageHistory(ABC):
    """A mutable list of past messages."""

    @abstractmethod
    def messages(self) -> list[BaseMessage]:
        """Return a snapshot of the stored messages, oldest first."""

    @abstractmethod
    def add_message(self, message: BaseMessage) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def add_user_message(self, text: str) -> None:
        self.add_message(HumanMessage(content=text))

    def add_ai_message(self, text: str) -> None:
        self.add_message(AIMessage(content=text))


class SimpleMemory(BaseChatMessageHistory):
    """Unbounded in-memory history.  Safe to share between threads."""

    def __init__(self, messages: list[BaseMessage] | None = None) -> None:
        self._messages: list[BaseMessage] = list(messages or [])
        self._lock = threading.Lock()

    def messages(self) -> list[BaseMessage]:
        with self._lock:
            return list(self._messages)

    def add_message(self, message: BaseMessage) -> None:
        with self._lock:
            self._messages.append(message)

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()


class WindowBufferMemory(SimpleMemory):
    """History that keeps only the most recent ``window_size`` messages."""

    def __init__(self, window_size: int = 10) -> None:
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        super().__init__()
        self.window_size = window_size

    def add_message(self, message: BaseMessage) -> None:
        with self._lock:
            self._messages.append(message)
            overflow = len(self._messages) - self.window_size
            if overflow > 0:
                del self._messages[:overflow]

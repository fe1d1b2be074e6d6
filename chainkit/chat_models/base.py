"""Chat model interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import Union

from chainkit.schemas.messages import AIMessage, BaseMessage, HumanMessage

# A flat message list, or groups of messages (header, history, prompt…)
MessagesInput = Union[Sequence[BaseMessage], Sequence[Sequence[BaseMessage]]]


def flatten_messages(messages: MessagesInput) -> list[BaseMessage]:
    """Flatten nested message groups into one list, preserving order."""
    flat: list[BaseMessage] = []
    for item in messages:
        if isinstance(item, BaseMessage):
            flat.append(item)
        else:
            flat.extend(item)
    return flat


class BaseChatModel(ABC):
    """A model that answers a list of messages with an :class:`AIMessage`."""

    @abstractmethod
    def generate(self, messages: MessagesInput) -> AIMessage:
        ...

    @abstractmethod
    async def agenerate(self, messages: MessagesInput) -> AIMessage:
        ...

    async def astream(self, messages: MessagesInput) -> AsyncIterator[str]:
        """Yield the reply in chunks.  Defaults to a single chunk."""
        message = await self.agenerate(messages)
        yield message.content

    def call(self, query: str) -> str:
        """Send *query* as a single human message and return the reply text."""
        return self.generate([HumanMessage(content=query)]).content

    async def acall(self, query: str) -> str:
        return (await self.agenerate([HumanMessage(content=query)])).content

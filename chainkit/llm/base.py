"""Text-completion model interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """A model that continues a prompt string."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        ...

    @abstractmethod
    async def agenerate(self, prompt: str) -> str:
        ...

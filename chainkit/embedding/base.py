"""Embedder interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Embedder(ABC):
    @abstractmethod
    def embed_documents(self, documents: list[str]) -> list[list[float]]:
        """Return one vector per document, in input order."""

    @abstractmethod
    def embed_query(self, text: str) -> list[float]:
        ...

    @abstractmethod
    async def aembed_documents(self, documents: list[str]) -> list[list[float]]:
        ...

    @abstractmethod
    async def aembed_query(self, text: str) -> list[float]:
        ...

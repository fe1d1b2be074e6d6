"""OpenAI embeddings (``POST /embeddings``) with an LRU cache for queries.

Query embeddings are cached under ``"<model>:<text>"``; document batches are
always fetched fresh since they are usually embedded once and stored
elsewhere.
"""

from __future__ import annotations

import logging

from chainkit import config
from chainkit.embedding.base import Embedder
from chainkit.services.cache import LRUCache
from chainkit.services.openai_client import OpenAIClient
from chainkit.services.openai_types import (
    EmbeddingRequest,
    EmbeddingResponse,
    parse_response,
    to_payload,
)

logger = logging.getLogger(__name__)

EMBEDDINGS_PATH = "/embeddings"


class OpenAIEmbedder(Embedder):
    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        *,
        client: OpenAIClient | None = None,
        cache: LRUCache | None = None,
    ) -> None:
        self.model = model or config.OPENAI_EMBEDDING_MODEL
        self._api_key = api_key
        self._client = client
        # Shared LRU cache (injectable for tests)
        self._cache = cache or LRUCache()

    @property
    def client(self) -> OpenAIClient:
        if self._client is None:
            self._client = OpenAIClient(api_key=self._api_key)
        return self._client

    def _cache_key(self, text: str) -> str:
        return f"{self.model}:{text}"

    def _payload(self, data: str | list[str]) -> dict:
        return to_payload(EmbeddingRequest(model=self.model, input=data))

    def embed_documents(self, documents: list[str]) -> list[list[float]]:
        if not documents:
            return []
        data = self.client.post(EMBEDDINGS_PATH, self._payload(list(documents)))
        return parse_response(EmbeddingResponse, data).extract_all_embeddings()

    async def aembed_documents(self, documents: list[str]) -> list[list[float]]:
        if not documents:
            return []
        data = await self.client.apost(EMBEDDINGS_PATH, self._payload(list(documents)))
        return parse_response(EmbeddingResponse, data).extract_all_embeddings()

    def embed_query(self, text: str) -> list[float]:
        key = self._cache_key(text)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache: hit for query embedding (%d chars)", len(text))
            return cached

        data = self.client.post(EMBEDDINGS_PATH, self._payload(text))
        vector = parse_response(EmbeddingResponse, data).extract_embedding()
        self._cache.put(key, vector)
        return vector

    async def aembed_query(self, text: str) -> list[float]:
        key = self._cache_key(text)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache: hit for query embedding (%d chars)", len(text))
            return cached

        data = await self.client.apost(EMBEDDINGS_PATH, self._payload(text))
        vector = parse_response(EmbeddingResponse, data).extract_embedding()
        self._cache.put(key, vector)
        return vector

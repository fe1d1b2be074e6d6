from chainkit.embedding.base import Embedder
from chainkit.embedding.openai import OpenAIEmbedder

__all__ = ["Embedder", "OpenAIEmbedder"]

"""Shared infrastructure: OpenAI HTTP transport, LRU cache, metrics."""

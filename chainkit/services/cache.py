"""Thread-safe LRU cache for embedding vectors, bounded by estimated bytes.

:class:`~chainkit.embedding.openai.OpenAIEmbedder` stores query vectors here
under ``"<model>:<text>"`` so repeating a query costs no API call.

Sizing
──────
A vector of floats is counted at 8 bytes per component (a float64), which
is how much it costs once held in memory.  Anything else falls back to the
length of its JSON encoding.  ``invalidate_prefix("text-embedding-ada-002:")``
drops every vector of one model at once, e.g. after switching models.

>>> cache = LRUCache(max_bytes=5 * 1024 * 1024)
>>> cache.put("text-embedding-ada-002:hello", [0.1, 0.2])
>>> cache.get("text-embedding-ada-002:hello")
[0.1, 0.2]
"""

from __future__ import annotations

import json
import logging
import threading
from collections import OrderedDict
from typing import Any

logger = logging.getLogger(__name__)

# 20 MB holds roughly 1 700 ada-002 vectors (1 536 floats each)
DEFAULT_MAX_BYTES = 20 * 1024 * 1024
BYTES_PER_FLOAT = 8


def estimate_bytes(value: Any) -> int:
    """Approximate in-memory size of a cached value."""
    if isinstance(value, list) and value and all(isinstance(v, float) for v in value):
        return len(value) * BYTES_PER_FLOAT
    try:
        return len(json.dumps(value, default=str).encode("utf-8"))
    except (TypeError, ValueError, OverflowError):
        return len(str(value).encode("utf-8"))


class LRUCache:
    def __init__(self, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.max_bytes = max_bytes
        self._entries: OrderedDict[str, tuple[Any, int]] = OrderedDict()
        self._size = 0
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Any | None:
        """Look up *key*, marking it most recently used.  ``None`` on a miss."""
        with self._lock:
            if key not in self._entries:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return self._entries[key][0]

    def put(self, key: str, value: Any) -> None:
        """Store *value*, evicting least recently used entries to make room.

        A value bigger than ``max_bytes`` on its own is never stored.
        """
        size = estimate_bytes(value)
        if size > self.max_bytes:
            logger.debug("Cache: %s is %d bytes, over the %d byte limit; not stored", key, size, self.max_bytes)
            return

        with self._lock:
            self._drop(key)
            while self._entries and self._size + size > self.max_bytes:
                oldest, (_, oldest_size) = self._entries.popitem(last=False)
                self._size -= oldest_size
                logger.debug("Cache: evicted %s (%d bytes)", oldest, oldest_size)
            self._entries[key] = (value, size)
            self._size += size

    def _drop(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        self._size -= entry[1]
        return True

    def invalidate(self, key: str) -> bool:
        """Forget *key*.  Returns whether it was cached."""
        with self._lock:
            return self._drop(key)

    def invalidate_prefix(self, prefix: str) -> int:
        """Forget every key starting with *prefix*.  Returns how many went."""
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for key in doomed:
                self._drop(key)
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._size = 0

    @property
    def current_bytes(self) -> int:
        return self._size

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    def has(self, key: str) -> bool:
        """Membership test that leaves LRU order and hit counters alone."""
        return key in self._entries

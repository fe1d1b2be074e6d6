"""Tests for the embedding-vector LRU cache."""

from __future__ import annotations

import pytest

from chainkit.services.cache import BYTES_PER_FLOAT, DEFAULT_MAX_BYTES, LRUCache, estimate_bytes

ADA = "text-embedding-ada-002"


def vec(n: int, fill: float = 0.5) -> list[float]:
    return [fill] * n


# ── Sizing ───────────────────────────────────────────────────────────


class TestEstimateBytes:
    def test_float_vector_counts_eight_bytes_per_component(self):
        assert estimate_bytes(vec(1536)) == 1536 * BYTES_PER_FLOAT

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("abc", 5),          # '"abc"'
            ({"a": 1}, 8),       # '{"a": 1}'
            ([], 2),             # '[]'
            ([1, 2], 6),         # ints are not a float vector
        ],
    )
    def test_other_values_use_json_length(self, value, expected):
        assert estimate_bytes(value) == expected

    def test_default_limit(self):
        assert LRUCache().max_bytes == DEFAULT_MAX_BYTES == 20 * 1024 * 1024


# ── Lookups ──────────────────────────────────────────────────────────


class TestLookups:
    def test_stores_and_returns_vector(self):
        cache = LRUCache()
        cache.put(f"{ADA}:hello", [0.1, 0.2, 0.3])
        assert cache.get(f"{ADA}:hello") == [0.1, 0.2, 0.3]

    def test_miss_returns_none(self):
        assert LRUCache().get(f"{ADA}:unknown") is None

    def test_counts_hits_and_misses(self):
        cache = LRUCache()
        cache.put("q", vec(4))
        cache.get("q")
        cache.get("q")
        cache.get("other")
        assert (cache.hits, cache.misses) == (2, 1)

    def test_has_does_not_count(self):
        cache = LRUCache()
        cache.put("q", vec(4))
        assert cache.has("q") and not cache.has("nope")
        assert (cache.hits, cache.misses) == (0, 0)

    def test_replacing_a_key_keeps_one_entry_and_resizes(self):
        cache = LRUCache()
        cache.put("q", vec(4))
        cache.put("q", vec(10))
        assert cache.entry_count == 1
        assert cache.current_bytes == 10 * BYTES_PER_FLOAT


# ── Eviction ─────────────────────────────────────────────────────────


class TestEviction:
    def test_oldest_vector_goes_first(self):
        # room for exactly two 4-float vectors
        cache = LRUCache(max_bytes=8 * BYTES_PER_FLOAT)
        cache.put("a", vec(4))
        cache.put("b", vec(4))
        cache.put("c", vec(4))
        assert not cache.has("a")
        assert cache.has("b") and cache.has("c")
        assert cache.current_bytes == 8 * BYTES_PER_FLOAT

    def test_reading_protects_an_entry(self):
        cache = LRUCache(max_bytes=8 * BYTES_PER_FLOAT)
        cache.put("a", vec(4))
        cache.put("b", vec(4))
        cache.get("a")
        cache.put("c", vec(4))
        assert cache.has("a")
        assert not cache.has("b")

    def test_large_insert_evicts_several(self):
        cache = LRUCache(max_bytes=8 * BYTES_PER_FLOAT)
        cache.put("a", vec(2))
        cache.put("b", vec(2))
        cache.put("c", vec(2))
        cache.put("big", vec(7))
        assert cache.entry_count == 1
        assert cache.has("big")

    def test_oversized_value_is_not_stored(self):
        cache = LRUCache(max_bytes=8 * BYTES_PER_FLOAT)
        cache.put("keep", vec(2))
        cache.put("huge", vec(9))
        assert not cache.has("huge")
        assert cache.has("keep")


# ── Invalidation ─────────────────────────────────────────────────────


class TestInvalidation:
    def test_invalidate_single_key(self):
        cache = LRUCache()
        cache.put("q", vec(4))
        assert cache.invalidate("q") is True
        assert cache.invalidate("q") is False
        assert cache.current_bytes == 0

    def test_invalidate_one_models_vectors(self):
        cache = LRUCache()
        cache.put(f"{ADA}:hello", vec(2))
        cache.put(f"{ADA}:world", vec(2))
        cache.put("text-embedding-3-small:hello", vec(2))

        assert cache.invalidate_prefix(f"{ADA}:") == 2
        assert cache.entry_count == 1
        assert cache.has("text-embedding-3-small:hello")
        assert cache.invalidate_prefix("nothing:") == 0

    def test_clear(self):
        cache = LRUCache()
        cache.put("a", vec(2))
        cache.put("b", vec(2))
        cache.clear()
        assert cache.entry_count == 0
        assert cache.current_bytes == 0

"""Tests for the fetched-body cache.

Validates:
- Daily key format and rotation
- LRU capacity and recency
- TTL expiry
- fetch_through: one network call per key, failures never stored
"""

from __future__ import annotations

import time
from datetime import date

import pytest

from devdocs_mcp.foundation.errors import ErrorCode, FetchError
from devdocs_mcp.io.cache import MemoryCache, daily_key, fetch_through


# ═════════════════════════════════════════════════════════════════════════════
# Keys
# ═════════════════════════════════════════════════════════════════════════════


def test_daily_key_format() -> None:
    assert daily_key("https://angular.dev/llms.txt", date(2025, 6, 3)) == "https://angular.dev/llms.txt-Tue Jun 03 2025"


def test_daily_key_rotates_with_day() -> None:
    url = "https://rxjs.dev/guide/overview"
    assert daily_key(url, date(2025, 6, 3)) != daily_key(url, date(2025, 6, 4))
    assert daily_key(url, date(2025, 6, 3)) == daily_key(url, date(2025, 6, 3))


def test_daily_key_defaults_to_today() -> None:
    assert daily_key("u") == daily_key("u", date.today())


# ═════════════════════════════════════════════════════════════════════════════
# MemoryCache
# ═════════════════════════════════════════════════════════════════════════════


def test_get_set_delete() -> None:
    cache = MemoryCache()
    assert cache.get("k") is None
    cache.set("k", "body")
    assert cache.get("k") == "body"
    assert "k" in cache
    assert cache.delete("k") is True
    assert cache.delete("k") is False
    assert "k" not in cache


def test_set_overwrites() -> None:
    cache = MemoryCache()
    cache.set("k", "old")
    cache.set("k", "new")
    assert cache.get("k") == "new"
    assert cache.size == 1


def test_empty_body_is_a_hit() -> None:
    cache = MemoryCache()
    cache.set("k", "")
    assert cache.get("k") == ""


def test_lru_evicts_least_recently_used() -> None:
    cache = MemoryCache(max_entries=2)
    cache.set("a", "1")
    cache.set("b", "2")
    assert cache.get("a") == "1"  # a is now most recent
    cache.set("c", "3")

    assert cache.get("b") is None
    assert cache.get("a") == "1"
    assert cache.get("c") == "3"
    assert cache.stats()["evictions"] == 1


def test_keys_ordered_by_recency() -> None:
    cache = MemoryCache()
    for k in ("a", "b", "c"):
        cache.set(k, k)
    cache.get("a")
    assert list(cache._entries) == ["b", "c", "a"]


def test_capacity_never_exceeded() -> None:
    cache = MemoryCache(max_entries=3)
    for i in range(10):
        cache.set(f"k{i}", str(i))
    assert cache.size == 3
    assert list(cache._entries) == ["k7", "k8", "k9"]


def test_invalid_capacity() -> None:
    with pytest.raises(ValueError):
        MemoryCache(max_entries=0)


def test_ttl_expiry() -> None:
    cache = MemoryCache(ttl=60)
    cache.set("k", "body")
    cache._entries["k"].expires_at = time.monotonic() - 1

    assert cache.get("k") is None
    assert cache.size == 0


def test_no_ttl_never_expires() -> None:
    cache = MemoryCache(ttl=None)
    cache.set("k", "body")
    assert cache._entries["k"].expires_at is None
    assert cache.get("k") == "body"


def test_eviction_prefers_expired_entries() -> None:
    cache = MemoryCache(max_entries=2)
    cache.set("old", "1")
    cache.set("stale", "2")
    cache.get("old")
    cache._entries["stale"].expires_at = time.monotonic() - 1
    cache.set("new", "3")

    assert list(cache._entries) == ["old", "new"]


def test_stats_counts_hits_and_misses() -> None:
    cache = MemoryCache(max_entries=4, ttl=10)
    cache.set("k", "v")
    cache.get("k")
    cache.get("missing")
    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["total_entries"] == 1
    assert stats["max_entries"] == 4
    assert stats["ttl"] == 10


def test_clear() -> None:
    cache = MemoryCache()
    cache.set("a", "1")
    cache.clear()
    assert cache.size == 0


# ═════════════════════════════════════════════════════════════════════════════
# fetch_through
# ═════════════════════════════════════════════════════════════════════════════


async def test_fetch_through_fetches_once() -> None:
    cache = MemoryCache()
    calls = 0

    async def fetch() -> str:
        nonlocal calls
        calls += 1
        return "body"

    assert await fetch_through(cache, "k", fetch) == "body"
    assert await fetch_through(cache, "k", fetch) == "body"
    assert calls == 1


async def test_fetch_through_does_not_store_failures() -> None:
    cache = MemoryCache()

    async def failing() -> str:
        raise FetchError("HTTP 500: Internal Server Error", ErrorCode.HTTP_STATUS, status=500)

    with pytest.raises(FetchError, match="HTTP 500"):
        await fetch_through(cache, "k", failing)
    assert cache.size == 0

    async def working() -> str:
        return "recovered"

    assert await fetch_through(cache, "k", working) == "recovered"

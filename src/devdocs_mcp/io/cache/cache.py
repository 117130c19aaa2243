"""Fetched-body caching keyed by URL and calendar day.

Cache keys default to ``<url>-<Day Mon DD YYYY>``, so entries rotate daily.
The in-memory backend adds an LRU capacity and an optional TTL so a
long-running process does not grow without bound.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable

from devdocs_mcp.observability import get_logger

DEFAULT_MAX_ENTRIES: int = 512
DEFAULT_TTL: float = 86400.0  # one day

Clock = Callable[[], date]

log = get_logger("cache")


def daily_key(url: str, day: date | None = None) -> str:
    """Default cache key for a URL: the URL plus the calendar day it was fetched on."""
    day = day or date.today()
    return f"{url}-{day:%a %b %d %Y}"


@dataclass(slots=True)
class CacheEntry:
    """A cached body with optional expiration."""
    value: str
    expires_at: float | None

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() > self.expires_at


class BodyCache(ABC):
    """Abstract base for fetched-body caches."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get cached body if present and not expired."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a body, overwriting any previous one under the key."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove one entry. Returns True if it existed."""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


class MemoryCache(BodyCache):
    """In-memory LRU cache with TTL-based expiration.

    Access is from a single event loop, so there is no lock: individual
    operations never interleave, though a check-fetch-store sequence can.

    Args:
        max_entries: Capacity; the least recently used entry is evicted beyond it
        ttl: Seconds an entry stays valid, or None for no expiry

    Example:
        >>> cache = MemoryCache(max_entries=2)
        >>> cache.set("a", "1"); cache.set("b", "2"); cache.get("a"); cache.set("c", "3")
        '1'
        >>> cache.get("b") is None
        True
    """

    __slots__ = ("_entries", "_max_entries", "_ttl", "_hits", "_misses", "_evictions")

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, ttl: float | None = DEFAULT_TTL) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_entries = max_entries
        self._ttl = ttl
        self._hits = self._misses = self._evictions = 0

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        if entry.expired:
            del self._entries[key]
            self._misses += 1
            return None
        self._entries.move_to_end(key)
        self._hits += 1
        return entry.value

    def set(self, key: str, value: str) -> None:
        expires_at = time.monotonic() + self._ttl if self._ttl is not None else None
        self._entries[key] = CacheEntry(value=value, expires_at=expires_at)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._evict_one()

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def _evict_one(self) -> None:
        """Drop an expired entry if any, else the least recently used."""
        victim = next((k for k, v in self._entries.items() if v.expired), None)
        if victim is None:
            victim = next(iter(self._entries))
        del self._entries[victim]
        self._evictions += 1

    @property
    def size(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, object]:
        """Cache statistics for monitoring."""
        expired = sum(1 for v in self._entries.values() if v.expired)
        return {
            "total_entries": len(self._entries),
            "expired_entries": expired,
            "max_entries": self._max_entries,
            "ttl": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
        }


async def fetch_through(cache: BodyCache, key: str, fetch: Callable[[], Awaitable[str]]) -> str:
    """Return the cached body for ``key`` or fetch, store and return it.

    A hit performs no I/O. Failures raised by ``fetch`` propagate unchanged and
    nothing is stored.
    """
    cached = cache.get(key)
    if cached is not None:
        log.debug("cache hit", key=key)
        return cached

    log.debug("cache miss", key=key)
    body = await fetch()
    cache.set(key, body)
    return body

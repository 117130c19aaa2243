"""Response caching."""

from .cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL,
    BodyCache,
    CacheEntry,
    Clock,
    MemoryCache,
    daily_key,
    fetch_through,
)

__all__ = [
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_TTL",
    "BodyCache",
    "CacheEntry",
    "Clock",
    "MemoryCache",
    "daily_key",
    "fetch_through",
]

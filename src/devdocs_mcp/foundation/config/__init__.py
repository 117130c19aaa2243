"""Configuration management using pydantic-settings."""

from .settings import (
    CacheSettings,
    DevdocsSettings,
    FanoutPolicy,
    HttpSettings,
    LoggingSettings,
    UnknownToolPolicy,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CacheSettings",
    "DevdocsSettings",
    "FanoutPolicy",
    "HttpSettings",
    "LoggingSettings",
    "UnknownToolPolicy",
    "clear_settings_cache",
    "get_settings",
]

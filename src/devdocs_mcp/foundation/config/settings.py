"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from devdocs_mcp.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.http.timeout
    10.0

    # Or with environment variables:
    # DEVDOCS_HTTP_TIMEOUT=5
    # DEVDOCS_LOG_LEVEL=DEBUG
    # DEVDOCS_CATALOG_PATH=./extra-catalog.json
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import ByteSize, Field, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FanoutPolicy = Literal["all_or_nothing", "partial"]
UnknownToolPolicy = Literal["empty", "error"]


class HttpSettings(BaseSettings):
    """HTTP fetch configuration."""

    model_config = SettingsConfigDict(env_prefix="DEVDOCS_HTTP_", extra="ignore")

    timeout: PositiveFloat = Field(default=10.0, description="Total deadline per fetch in seconds")
    follow_redirects: bool = False
    verify_ssl: bool = True
    user_agent: str = "devdocs-mcp/1.0"
    max_response_size: ByteSize | None = Field(
        default=None,
        description="Reject bodies larger than this (unset = unbounded)",
    )


class CacheSettings(BaseSettings):
    """Response cache configuration."""

    model_config = SettingsConfigDict(env_prefix="DEVDOCS_CACHE_", extra="ignore")

    max_entries: PositiveInt = Field(default=512, description="LRU capacity")
    ttl: PositiveFloat | None = Field(default=86400.0, description="Entry TTL in seconds (unset = none)")


class LoggingSettings(BaseSettings):
    """Logging configuration. Logs always go to stderr."""

    model_config = SettingsConfigDict(env_prefix="DEVDOCS_LOG_", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class DevdocsSettings(BaseSettings):
    """Root settings for the docs server.

    Example environment variables:
        DEVDOCS_FANOUT_POLICY=partial
        DEVDOCS_UNKNOWN_TOOL_POLICY=error
        DEVDOCS_CACHE_MAX_ENTRIES=128
        DEVDOCS_HTTP_TIMEOUT=10
    """

    model_config = SettingsConfigDict(
        env_prefix="DEVDOCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    server_name: str = "angular-docs-mcp"
    server_version: str = "1.0.0"
    catalog_path: Path | None = Field(default=None, description="JSON file merged into the built-in catalog")
    fanout_policy: FanoutPolicy = "all_or_nothing"
    unknown_tool_policy: UnknownToolPolicy = "empty"

    http: HttpSettings = Field(default_factory=HttpSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> DevdocsSettings:
    """Get the global settings instance (cached)."""
    return DevdocsSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

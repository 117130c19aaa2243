"""Server assembly: settings in, a ready-to-serve StdioServer out."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import httpx

from devdocs_mcp.catalog import ResourceCatalog, load_catalog
from devdocs_mcp.foundation.config import DevdocsSettings, get_settings
from devdocs_mcp.io.cache import MemoryCache
from devdocs_mcp.io.http import Fetcher
from devdocs_mcp.registry import ToolRegistry
from devdocs_mcp.tools import ToolContext, builtin_tools

from .dispatcher import Dispatcher
from .transport import StdioServer


def build_context(
    settings: DevdocsSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    catalog: ResourceCatalog | None = None,
    clock: Callable[[], date] = date.today,
) -> ToolContext:
    return ToolContext(
        fetcher=Fetcher(settings.http, transport=transport),
        cache=MemoryCache(max_entries=settings.cache.max_entries, ttl=settings.cache.ttl),
        catalog=catalog if catalog is not None else load_catalog(settings.catalog_path),
        clock=clock,
        fanout_policy=settings.fanout_policy,
    )


def build_server(
    settings: DevdocsSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    catalog: ResourceCatalog | None = None,
    clock: Callable[[], date] = date.today,
) -> StdioServer:
    """Wire catalog, fetcher, cache, tools, registry and dispatcher together.

    ``transport`` replaces the network (tests pass an ``httpx.MockTransport``);
    ``clock`` supplies the calendar day used in cache keys.
    """
    settings = settings or get_settings()
    ctx = build_context(settings, transport=transport, catalog=catalog, clock=clock)
    registry = ToolRegistry(builtin_tools(ctx))
    return StdioServer(Dispatcher(registry, settings), ctx.fetcher)

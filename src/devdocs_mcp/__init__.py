"""devdocs-mcp - documentation proxy for AI assistants over the Model Context Protocol.

Serves three tools over newline-delimited JSON-RPC 2.0 on stdio:

- ``get_angular_docs``: Angular v20+ llms.txt documentation (full, summary or both)
- ``get_tech_docs``: catalog-driven docs for Angular, TypeScript, RxJS, Jest and Nx
- ``get_custom_resource``: any http(s) URL

Fetched bodies are cached per URL and calendar day, so repeated requests on
the same day never touch the network.

Quick Start:
    $ devdocs-mcp --log-level info
    devdocs-mcp server started

Embedding:
    >>> from devdocs_mcp import build_server, serve_stdio
    >>> import asyncio
    >>> asyncio.run(serve_stdio(build_server()))

Configuration comes from ``DEVDOCS_*`` environment variables (see
``devdocs_mcp.foundation.config``).
"""

from __future__ import annotations

__version__ = "1.0.0"

# Catalog
from .catalog import ResourceCatalog, default_catalog, load_catalog

# Config
from .foundation.config import DevdocsSettings, get_settings

# Errors
from .foundation.errors import CatalogError, ErrorCode, FetchError, RpcError, RpcErrorCode, ToolError, ToolException

# IO
from .io.cache import MemoryCache, daily_key
from .io.http import Fetcher

# Registry and tools
from .registry import ToolRegistry
from .tools import AngularDocsTool, CustomResourceTool, DocTool, TechDocsTool, ToolContext, builtin_tools

# Server
from .server import Dispatcher, StdioServer, build_server, serve_stdio

__all__ = [
    "__version__",
    # Catalog
    "ResourceCatalog",
    "default_catalog",
    "load_catalog",
    # Config
    "DevdocsSettings",
    "get_settings",
    # Errors
    "CatalogError",
    "ErrorCode",
    "FetchError",
    "RpcError",
    "RpcErrorCode",
    "ToolError",
    "ToolException",
    # IO
    "Fetcher",
    "MemoryCache",
    "daily_key",
    # Registry and tools
    "AngularDocsTool",
    "CustomResourceTool",
    "DocTool",
    "TechDocsTool",
    "ToolContext",
    "ToolRegistry",
    "builtin_tools",
    # Server
    "Dispatcher",
    "StdioServer",
    "build_server",
    "serve_stdio",
]

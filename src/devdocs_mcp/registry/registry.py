"""Central registry for tool discovery and invocation.

The registry provides:
- Tool registration and lookup by exact name
- MCP tool definitions for tools/list, in registration order
- Invocation with argument validation and error-to-text conversion
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from typing import Any

from devdocs_mcp.foundation.errors import ErrorCode, ToolError, ToolException
from devdocs_mcp.observability import get_logger
from devdocs_mcp.tools import DocTool, ToolOutcome

log = get_logger("registry")


class ToolRegistry:
    """Name -> tool table used by the dispatcher.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(AngularDocsTool(ctx))
        >>> outcome = await registry.invoke("get_angular_docs", {"section": "summary"})
    """

    __slots__ = ("_tools",)

    def __init__(self, tools: list[DocTool] | None = None) -> None:
        self._tools: dict[str, DocTool] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: DocTool) -> None:
        name = tool.metadata.name
        if name in self._tools:
            raise ValueError(f"Tool '{name}' already registered")
        self._tools[name] = tool

    def get(self, name: str) -> DocTool | None:
        return self._tools.get(name)

    def __getitem__(self, name: str) -> DocTool:
        return self._tools[name]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[DocTool]:
        return iter(self._tools.values())

    def definitions(self) -> list[dict[str, Any]]:
        """Tool definitions (name, description, inputSchema) for enabled tools."""
        return [tool.definition() for tool in self if tool.metadata.enabled]

    async def invoke(self, name: str, arguments: dict[str, Any] | None) -> ToolOutcome | None:
        """Run a tool by name. Returns None when no enabled tool has that name.

        A ToolException (e.g. invalid arguments) is rendered into the outcome
        text; any other exception propagates to the caller.
        """
        tool = self._tools.get(name)
        if tool is None or not tool.metadata.enabled:
            return None

        start = time.perf_counter()
        try:
            outcome = await tool.arun(arguments or {})
        except ToolException as e:
            outcome = ToolOutcome(e.error.render(), is_error=True)
        log.info("tool invoked", tool=name, is_error=outcome.is_error,
                 duration_ms=round((time.perf_counter() - start) * 1000, 2))
        return outcome

    @staticmethod
    def not_found(name: str) -> ToolOutcome:
        """Outcome used when unknown tool names are reported rather than ignored."""
        text = ToolError.create(name or "unknown", f"Tool '{name}' not found", ErrorCode.NOT_FOUND,
                                recoverable=False).render()
        return ToolOutcome(text, is_error=True)

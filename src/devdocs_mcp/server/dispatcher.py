"""JSON-RPC 2.0 method dispatch for the MCP docs server.

One decoded request object in, at most one response object out. Tool failures
are content (a normal result whose text describes the failure); only unknown
methods and unexpected exceptions become JSON-RPC error objects.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Any

from devdocs_mcp.foundation.config import DevdocsSettings
from devdocs_mcp.foundation.errors import RpcError, RpcErrorCode
from devdocs_mcp.observability import get_logger, log_context
from devdocs_mcp.registry import ToolRegistry

PROTOCOL_VERSION = "2024-11-05"

Message = dict[str, Any]
Handler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]

log = get_logger("dispatcher")


def success(request_id: Any, result: dict[str, Any]) -> Message:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def failure(request_id: Any, code: RpcErrorCode, message: str) -> Message:
    return {"jsonrpc": "2.0", "id": request_id, "error": RpcError(code, message).to_dict()}


class Dispatcher:
    """Routes ``initialize``, ``tools/list``, ``tools/call`` and ``ping``.

    A message without an ``id`` member is a notification: it is handled like
    any other request but ``handle`` returns None so nothing is written back.
    """

    __slots__ = ("_registry", "_settings", "_methods")

    def __init__(self, registry: ToolRegistry, settings: DevdocsSettings | None = None) -> None:
        self._registry = registry
        self._settings = settings or DevdocsSettings()
        self._methods: dict[str, Handler] = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "ping": self._ping,
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def handle(self, message: Message) -> Message | None:
        is_notification = "id" not in message
        request_id = message.get("id")
        method = message.get("method")

        start = time.perf_counter()
        with log_context(method=method if isinstance(method, str) else None, id=request_id):
            response = await self._dispatch(request_id, method, message.get("params"))
            log.info("request handled", duration_ms=round((time.perf_counter() - start) * 1000, 2),
                     ok="result" in response)
        return None if is_notification else response

    async def _dispatch(self, request_id: Any, method: Any, params: Any) -> Message:
        handler = self._methods.get(method) if isinstance(method, str) else None
        if handler is None:
            return failure(request_id, RpcErrorCode.METHOD_NOT_FOUND, "Method not found")
        try:
            return success(request_id, await handler(params if isinstance(params, dict) else {}))
        except RpcError as e:
            return failure(request_id, e.code, e.message)
        except Exception as e:
            log.exception("request failed", error=str(e))
            return failure(request_id, RpcErrorCode.INTERNAL_ERROR, str(e))

    # ─────────────────────────────────────────────────────────────────
    # Methods
    # ─────────────────────────────────────────────────────────────────

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "resources": {}},
            "serverInfo": {"name": self._settings.server_name, "version": self._settings.server_version},
        }

    async def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": self._registry.definitions()}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        report_errors = self._settings.unknown_tool_policy == "error"
        outcome = await self._registry.invoke(name, arguments) if isinstance(name, str) else None
        if outcome is None:
            if not report_errors:
                return {"content": [{"type": "text", "text": ""}]}
            outcome = ToolRegistry.not_found(str(name) if name is not None else "")

        result: dict[str, Any] = {"content": [{"type": "text", "text": outcome.text}]}
        if report_errors and outcome.is_error:
            result["isError"] = True
        return result

    async def _ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

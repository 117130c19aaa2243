"""Core tool abstractions: DocTool, ToolMetadata, ToolContext.

A tool is a subclass of DocTool with a Pydantic parameter schema and an async
``run`` that returns ``Ok(text)`` or ``Err(text)``. Either way the text is what
the caller sees: fetch failures are content, not protocol errors.

Example:
    >>> class EchoParams(BaseModel):
    ...     text: str = Field(..., description="Text to echo")
    ...
    >>> class EchoTool(DocTool[EchoParams]):
    ...     metadata = ToolMetadata(name="echo", description="Echo text back to the caller")
    ...     params_schema = EchoParams
    ...
    ...     async def run(self, params: EchoParams) -> ToolResult:
    ...         return Ok(params.text)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devdocs_mcp.catalog import ResourceCatalog, default_catalog
from devdocs_mcp.foundation.config import FanoutPolicy
from devdocs_mcp.foundation.errors import Err, ErrorCode, Ok, Result, ToolError, ToolException
from devdocs_mcp.io.cache import BodyCache, MemoryCache, daily_key, fetch_through
from devdocs_mcp.io.http import Fetcher
from devdocs_mcp.observability import get_logger
from devdocs_mcp.runtime import fetch_joined

ToolResult = Result[str, str]

log = get_logger("tools")


class ToolMetadata(BaseModel):
    """Metadata describing a tool, advertised through tools/list."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r"^[a-z][a-z0-9_]*$")
    description: str = Field(..., min_length=10)
    category: str = Field(default="docs")
    enabled: bool = Field(default=True)


@dataclass(slots=True, frozen=True)
class ToolOutcome:
    """Text returned to the caller plus whether it describes a failure."""

    text: str
    is_error: bool = False


@dataclass(slots=True)
class ToolContext:
    """Collaborators shared by every tool: catalog, fetcher, cache and day clock."""

    fetcher: Fetcher
    cache: BodyCache = field(default_factory=MemoryCache)
    catalog: ResourceCatalog = field(default_factory=default_catalog)
    clock: Callable[[], date] = date.today
    fanout_policy: FanoutPolicy = "all_or_nothing"

    def key_for(self, url: str) -> str:
        return daily_key(url, self.clock())

    async def fetch_cached(self, url: str, key: str | None = None) -> str:
        """Cache lookup, fetch on miss, store on success."""
        return await fetch_through(self.cache, key or self.key_for(url), lambda: self.fetcher.fetch(url))

    async def fetch_many(self, urls: tuple[str, ...] | list[str]) -> str:
        """Fetch ``urls`` concurrently through the cache and join them under the fan-out policy."""
        return await fetch_joined(urls, self.fetch_cached, self.fanout_policy)


TParams = TypeVar("TParams", bound=BaseModel)


class DocTool(ABC, Generic[TParams]):
    """Abstract base class for all documentation tools.

    Subclasses must:
    - Define `metadata` class variable with ToolMetadata
    - Define `params_schema` class variable with the Pydantic model type
    - Implement `run(params)` returning Ok/Err text

    Optional override:
    - `schema_extras()` to add per-property JSON schema keys (e.g. ``enum``)
    """

    metadata: ClassVar[ToolMetadata]
    params_schema: ClassVar[type[BaseModel]]

    __slots__ = ("ctx",)

    def __init__(self, ctx: ToolContext) -> None:
        self.ctx = ctx

    @abstractmethod
    async def run(self, params: TParams) -> ToolResult:
        ...

    def schema_extras(self) -> dict[str, dict[str, Any]]:
        return {}

    def input_schema(self) -> dict[str, Any]:
        """JSON schema advertised as the tool's ``inputSchema``."""
        schema = self.params_schema.model_json_schema(by_alias=True)
        properties = {name: _clean_property(prop) for name, prop in schema.get("properties", {}).items()}
        for name, extra in self.schema_extras().items():
            properties.setdefault(name, {}).update(extra)
        out: dict[str, Any] = {"type": "object", "properties": properties}
        if required := schema.get("required"):
            out["required"] = list(required)
        return out

    def definition(self) -> dict[str, Any]:
        return {
            "name": self.metadata.name,
            "description": self.metadata.description,
            "inputSchema": self.input_schema(),
        }

    async def arun(self, arguments: dict[str, Any]) -> ToolOutcome:
        """Validate raw arguments and run the tool.

        Raises ToolException when the arguments do not fit ``params_schema``.
        """
        try:
            params = self.params_schema.model_validate(arguments)
        except ValidationError as e:
            raise ToolException(_invalid_params(self.metadata.name, e)) from e

        result = await self.run(params)  # type: ignore[arg-type]
        if result.is_err():
            log.info("tool returned error text", tool=self.metadata.name)
        return result.match(
            ok=lambda text: ToolOutcome(text),
            err=lambda text: ToolOutcome(text, is_error=True),
        )

    @staticmethod
    def _ok(text: str) -> ToolResult:
        return Ok(text)

    @staticmethod
    def _err(text: str) -> ToolResult:
        return Err(text)


def _clean_property(prop: dict[str, Any]) -> dict[str, Any]:
    """Strip Pydantic-specific keys and collapse ``X | None`` to ``X``."""
    prop = dict(prop)
    if "anyOf" in prop:
        branches = [b for b in prop.pop("anyOf") if b.get("type") != "null"]
        if len(branches) == 1:
            prop = {**branches[0], **prop}
    return {k: v for k, v in prop.items() if k not in ("title", "default")}


def _invalid_params(tool_name: str, exc: ValidationError) -> ToolError:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}" for err in exc.errors()
    )
    return ToolError.create(tool_name, f"Invalid parameters: {problems}", ErrorCode.INVALID_PARAMS, recoverable=False)

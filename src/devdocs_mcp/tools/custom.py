"""get_custom_resource: any http(s) URL, cached under a caller-chosen or daily key."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from .base import DocTool, ToolMetadata, ToolResult


class CustomResourceParams(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: str = Field(..., description="URL to fetch content from")
    cache_key: str | None = Field(default=None, alias="cacheKey", description="Optional cache key for the resource")


class CustomResourceTool(DocTool[CustomResourceParams]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get_custom_resource",
        description="Fetch content from a custom URL",
        category="web",
    )
    params_schema: ClassVar[type[CustomResourceParams]] = CustomResourceParams

    async def run(self, params: CustomResourceParams) -> ToolResult:
        url = params.url
        try:
            body = await self.ctx.fetch_cached(url, params.cache_key or None)
        except Exception as e:
            return self._err(f"Error fetching custom resource from {url}: {e}")
        return self._ok(f"# Custom Resource from {url}\n\n{body}")

"""get_tech_docs: catalog-driven documentation for a technology and optional category."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from devdocs_mcp.catalog import CATEGORY_HINTS

from .base import DocTool, ToolMetadata, ToolResult


class TechDocsParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    technology: str = Field(..., description="Technology to fetch docs for")
    category: str | None = Field(default=None, description="Specific category within the technology")


class TechDocsTool(DocTool[TechDocsParams]):
    """Technology and category are matched exactly against the catalog.

    Their enumerations are advertised in the schema but not enforced, so an
    unknown technology gets the listing of valid ones and an unknown category
    falls back to every URL of the technology.
    """

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get_tech_docs",
        description="Fetch documentation for various technologies (Angular, TypeScript, RxJS, Jest, Nx)",
        category="catalog",
    )
    params_schema: ClassVar[type[TechDocsParams]] = TechDocsParams

    def schema_extras(self) -> dict[str, dict[str, Any]]:
        catalog = self.ctx.catalog
        return {
            "technology": {"enum": list(catalog.technologies())},
            "category": {"enum": list(dict.fromkeys((*CATEGORY_HINTS, *catalog.categories())))},
        }

    async def run(self, params: TechDocsParams) -> ToolResult:
        technology, category = params.technology, params.category
        urls = self.ctx.catalog.resolve(technology, category)
        if urls is None:
            available = ", ".join(self.ctx.catalog.technologies())
            return self._err(f"Error: Technology '{technology}' not found. Available: {available}")

        try:
            body = await self.ctx.fetch_many(urls)
        except Exception as e:
            return self._err(f"Error fetching {technology} documentation: {e}")

        title = f"# {technology.upper()} Documentation"
        category_part = f" - {category}" if category else ""
        return self._ok(f"{title}{category_part}\n\n{body}")

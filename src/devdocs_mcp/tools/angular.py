"""get_angular_docs: the two canonical Angular LLM documentation files."""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devdocs_mcp.catalog import ANGULAR_FULL_URL, ANGULAR_SUMMARY_URL

from .base import DocTool, ToolMetadata, ToolResult

Section = Literal["full", "summary", "both"]
SECTIONS: tuple[Section, ...] = ("full", "summary", "both")

TITLE = "# Angular v20+ Documentation and Best Practices"


class AngularDocsParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    section: str | None = Field(default=None, description="Specific section to fetch")

    @field_validator("section", mode="before")
    @classmethod
    def _non_string_means_both(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None


def urls_for_section(section: str | None) -> tuple[str, ...]:
    """``full`` and ``summary`` pick one file; anything else (including None) picks both."""
    match section:
        case "full": return (ANGULAR_FULL_URL,)
        case "summary": return (ANGULAR_SUMMARY_URL,)
        case _: return (ANGULAR_FULL_URL, ANGULAR_SUMMARY_URL)


class AngularDocsTool(DocTool[AngularDocsParams]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get_angular_docs",
        description="Fetch latest Angular v20+ documentation and best practices",
        category="angular",
    )
    params_schema: ClassVar[type[AngularDocsParams]] = AngularDocsParams

    def schema_extras(self) -> dict[str, dict[str, Any]]:
        return {"section": {"enum": list(SECTIONS)}}

    async def run(self, params: AngularDocsParams) -> ToolResult:
        try:
            body = await self.ctx.fetch_many(urls_for_section(params.section))
        except Exception as e:
            return self._err(f"Error fetching Angular documentation: {e}")
        return self._ok(f"{TITLE}\n\n{body}")

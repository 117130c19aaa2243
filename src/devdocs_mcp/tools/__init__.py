"""Documentation tools exposed over tools/call."""

from .angular import AngularDocsParams, AngularDocsTool, urls_for_section
from .base import DocTool, ToolContext, ToolMetadata, ToolOutcome, ToolResult
from .custom import CustomResourceParams, CustomResourceTool
from .tech import TechDocsParams, TechDocsTool


def builtin_tools(ctx: ToolContext) -> list[DocTool]:
    """The three tools, in the order tools/list advertises them."""
    return [AngularDocsTool(ctx), TechDocsTool(ctx), CustomResourceTool(ctx)]


__all__ = [
    "AngularDocsParams",
    "AngularDocsTool",
    "CustomResourceParams",
    "CustomResourceTool",
    "DocTool",
    "TechDocsParams",
    "TechDocsTool",
    "ToolContext",
    "ToolMetadata",
    "ToolOutcome",
    "ToolResult",
    "builtin_tools",
    "urls_for_section",
]

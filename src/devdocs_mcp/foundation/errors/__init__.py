"""Unified error handling for devdocs_mcp.

- ErrorCode / RpcErrorCode: tool-level and protocol-level codes
- ToolError/ToolException: structured tool failures rendered as text
- FetchError/CatalogError/RpcError: domain exceptions
- Result/Ok/Err: per-operation outcomes
- ErrorTrace/ErrorContext: error provenance
"""

from .errors import (
    CatalogError,
    ErrorCode,
    FetchError,
    RpcError,
    RpcErrorCode,
    ToolError,
    ToolException,
    classify_exception,
)
from .result import Err, Ok, Result
from .types import ErrorContext, ErrorTrace, JsonDict, JsonValue

__all__ = [
    "ErrorCode", "RpcErrorCode", "ToolError", "ToolException", "classify_exception",
    "FetchError", "CatalogError", "RpcError",
    "Result", "Ok", "Err",
    "ErrorContext", "ErrorTrace", "JsonDict", "JsonValue",
]

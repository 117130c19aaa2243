"""Standardized error handling for tools, fetches and the RPC layer.

Provides error codes and structured error responses. Tool-level failures are
rendered as text for the caller; only protocol faults become JSON-RPC errors.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from functools import lru_cache
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import ErrorTrace


class ErrorCode(StrEnum):
    """Machine-readable classification for tool and fetch failures."""
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    HTTP_STATUS = "HTTP_STATUS"
    INVALID_PARAMS = "INVALID_PARAMS"
    NOT_FOUND = "NOT_FOUND"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UNKNOWN = "UNKNOWN"


class RpcErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes emitted by the dispatcher."""
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "connect": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "ssl": ErrorCode.NETWORK_ERROR,
    "validation": ErrorCode.INVALID_PARAMS,
    "value": ErrorCode.INVALID_PARAMS,
    "notfound": ErrorCode.NOT_FOUND,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXTERNAL_SERVICE_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via pattern matching on name/message."""
    if isinstance(exc, FetchError):
        return exc.code
    return _classify_cached(f"{type(exc).__name__} {exc}")


_RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({ErrorCode.TIMEOUT, ErrorCode.NETWORK_ERROR})


class ToolError(BaseModel):
    """Structured error response for tool failures.

    Attributes:
        tool_name: Name of the tool that failed
        message: Human-readable error message
        code: Machine-readable error code
        recoverable: Whether the error might succeed on a later call
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, validate_default=True)

    tool_name: Annotated[str, Field(min_length=1)]
    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode = ErrorCode.UNKNOWN
    recoverable: bool = True

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @classmethod
    def create(
        cls,
        tool_name: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        recoverable: bool = True,
    ) -> Self:
        """Factory method for construction."""
        return cls(tool_name=tool_name, message=message, code=code, recoverable=recoverable)

    def render(self) -> str:
        """Format error as tool text content."""
        parts = [f"**Tool Error ({self.tool_name}):** {self.message}"]
        if self.recoverable:
            parts.append("\n_This error may be recoverable - consider retrying or trying an alternative approach._")
        return "".join(parts)

    __str__ = render


class ToolException(Exception):
    """Exception wrapping a ToolError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: ToolError) -> None:
        self.error = error
        super().__init__(error.message)


class FetchError(Exception):
    """A single HTTP(S) fetch failed: bad scheme, network, timeout or non-2xx status.

    The message is what ends up in the tool's text content, so it stays short
    (``HTTP 404: Not Found``, ``Request timeout``).
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NETWORK_ERROR,
        *,
        url: str | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.url = url
        self.status = status

    @property
    def trace(self) -> ErrorTrace:
        meta = {"url": self.url} if self.url else {}
        return ErrorTrace(
            message=self.message,
            error_code=self.code.value,
            recoverable=self.code in _RETRYABLE_CODES,
        ).with_operation("fetch", **meta)


class CatalogError(ValueError):
    """An extra resource catalog could not be loaded or has the wrong shape."""


class RpcError(Exception):
    """Protocol-level failure converted to a JSON-RPC error object."""

    def __init__(self, code: RpcErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"code": int(self.code), "message": self.message}

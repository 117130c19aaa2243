"""Type aliases and error context tracking.

Uses Pydantic models for validation/serialization.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

_EMPTY_META: JsonDict = {}


class ErrorContext(BaseModel):
    """Context for an error at a call site: operation plus metadata."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    operation: Annotated[str, Field(min_length=1)]
    metadata: JsonDict = Field(default_factory=dict, repr=False)


_EMPTY_CONTEXTS: tuple[ErrorContext, ...] = ()


class ErrorTrace(BaseModel):
    """Stack of error contexts forming a call-chain trace. Immutable."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, validate_default=True, extra="forbid")

    message: Annotated[str, Field(min_length=1)]
    contexts: tuple[ErrorContext, ...] = _EMPTY_CONTEXTS
    error_code: str | None = None
    recoverable: bool = True

    @field_serializer("contexts")
    def _serialize_contexts(self, v: tuple[ErrorContext, ...]) -> list[JsonDict]:
        return [ctx.model_dump() for ctx in v]

    def with_operation(self, operation: str, **metadata: JsonValue) -> "ErrorTrace":
        """Add context with operation info (returns a new trace)."""
        ctx = ErrorContext.model_construct(operation=operation, metadata=metadata or _EMPTY_META)
        return ErrorTrace.model_construct(
            message=self.message,
            contexts=(*self.contexts, ctx),
            error_code=self.error_code,
            recoverable=self.recoverable,
        )

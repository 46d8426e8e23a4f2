"""ToolResult — the uniform return value of every tool-callable operation."""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel

from archetype.validation.report import Diagnostic

ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
DUPLICATE_ENTITY = "DUPLICATE_ENTITY"
MALFORMED_INPUT = "MALFORMED_INPUT"
UNKNOWN_TOOL = "UNKNOWN_TOOL"


class ToolError(BaseModel):
    code: str
    message: str
    suggestion: str | None = None
    path: str | None = None

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> ToolError:
        return cls(
            code=diagnostic.code.value,
            message=diagnostic.message,
            suggestion=diagnostic.suggestion,
            path=diagnostic.path or None,
        )


class ToolResult(BaseModel):
    """Outcome of a builder operation, shaped for an agent to read."""

    success: bool
    message: str
    data: Any = None
    errors: list[ToolError] | None = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> ToolResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, errors: Iterable[ToolError]) -> ToolResult:
        return cls(success=False, message=message, errors=list(errors))

    @classmethod
    def error(cls, code: str, message: str, suggestion: str | None = None) -> ToolResult:
        """Failure carrying a single error whose message repeats *message*."""
        return cls.fail(message, [ToolError(code=code, message=message, suggestion=suggestion)])

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

"""Exceptions raised by tool operations.

Every failure a tool surfaces is a :class:`ToolError`; the router turns it
into a protocol-level ``INTERNAL_ERROR`` while keeping ``code`` and
``details`` for diagnostics.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from adstxt_mcp.schemas.common import ErrorDetail


class ToolError(Exception):
    """Base class for failures surfaced by a tool call."""

    code = "TOOL_ERROR"

    def __init__(self, message: str, *, code: str | None = None, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ToolInputError(ToolError):
    """Arguments did not match the tool's declared shape. Raised before any network call."""

    code = "VALIDATION_ERROR"

    @classmethod
    def from_validation_error(cls, tool: str, exc: ValidationError) -> "ToolInputError":
        fields = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "arguments",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        summary = "; ".join(f"{f['field']}: {f['message']}" for f in fields)
        return cls(f"Invalid arguments for {tool}: {summary}", details=fields)


class BackendError(ToolError):
    """The backend (or the transport in front of it) reported a failure."""

    code = "SERVER_ERROR"

    @classmethod
    def from_error(cls, error: ErrorDetail | None, fallback: str) -> "BackendError":
        if error is None:
            return cls(fallback)
        return cls(error.message or fallback, code=error.code, details=error.details)

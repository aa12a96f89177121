"""Shared response envelope and error schema."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ErrorDetail(BaseModel):
    """Structured error carried by a failed envelope.

    Backends do not always send both fields, so ``code`` and ``message`` have
    defaults; an empty ``message`` lets callers substitute their own text.
    Extra keys in the backend's error object are kept.
    """

    model_config = ConfigDict(extra="allow")

    code: str = UNKNOWN_ERROR
    message: str = ""
    details: Any | None = None


class ApiResponse(BaseModel):
    """Standard ``{success, data, error}`` envelope for every JSON API response.

    Backend bodies are kept as-is: ``data`` is never re-shaped and unknown
    top-level keys survive. Only the half of the envelope that contradicts
    ``success`` is dropped, so ``success=True`` never carries ``error`` and
    ``success=False`` never carries ``data``.
    """

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any | None = None
    error: ErrorDetail | None = None

    @field_validator("error", mode="before")
    @classmethod
    def _wrap_plain_message(cls, value: Any) -> Any:
        # {"error": "Domain not found"}
        if isinstance(value, str):
            return {"message": value}
        return value

    @model_validator(mode="after")
    def _enforce_exclusive_payload(self) -> "ApiResponse":
        if self.success:
            self.error = None
        else:
            self.data = None
        return self

    @classmethod
    def failure(cls, error: ErrorDetail) -> "ApiResponse":
        return cls(success=False, error=error)

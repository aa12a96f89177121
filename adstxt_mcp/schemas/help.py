"""Error-help schemas."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorHelpResult(BaseModel):
    """Help text for ads.txt validation warnings, optionally narrowed to one code."""

    content: str
    url: str | None = None

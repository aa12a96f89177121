"""Helpers shared by the service modules (no network access)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from adstxt_mcp.errors import BackendError
from adstxt_mcp.schemas.common import ApiResponse


def unwrap(response: ApiResponse, fallback: str) -> Any:
    """Return ``response.data`` or raise :class:`BackendError`.

    The backend's message wins; *fallback* is used when it sent none.
    """
    if not response.success:
        raise BackendError.from_error(response.error, fallback)
    return response.data


def segment(value: str) -> str:
    """Percent-encode one URL path segment."""
    return quote(value, safe="")


def compact(body: dict[str, Any]) -> dict[str, Any]:
    """Drop ``None`` values so absent optional fields are left out of the JSON body."""
    return {key: value for key, value in body.items() if value is not None}

"""Failure classification and normalization for backend calls.

Every exception escaping an outbound request is mapped once, by
:func:`classify_failure`, to a :class:`FailureKind`. Retry decisions and
error normalization both match on that kind instead of inspecting exception
types themselves.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx

from adstxt_mcp.schemas.common import UNKNOWN_ERROR, ErrorDetail

SERVER_ERROR = "SERVER_ERROR"
TIMEOUT = "TIMEOUT"
NETWORK_ERROR = "NETWORK_ERROR"


class FailureKind(str, Enum):
    """Ordered failure classes; earlier members take precedence."""

    BACKEND_ERROR = "backend_error"
    """An HTTP error response with a structured ``error`` body."""

    HTTP_STATUS = "http_status"
    """An HTTP error response without a usable error body."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    UNKNOWN = "unknown"


class ApiClientError(Exception):
    """Raised by :meth:`ApiClient.get_raw`; carries the normalized error."""

    def __init__(self, error: ErrorDetail) -> None:
        super().__init__(error.message)
        self.error = error


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _structured_error(body: Any) -> dict[str, Any] | None:
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and (error.get("code") or error.get("message")):
        return error
    return None


def classify_failure(exc: BaseException) -> FailureKind:
    if isinstance(exc, httpx.HTTPStatusError):
        if _structured_error(_response_body(exc.response)) is not None:
            return FailureKind.BACKEND_ERROR
        return FailureKind.HTTP_STATUS
    if isinstance(exc, httpx.TimeoutException):
        return FailureKind.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return FailureKind.NETWORK
    return FailureKind.UNKNOWN


def is_retryable(exc: BaseException) -> bool:
    """Timeouts and 5xx responses are retried; nothing else is."""
    kind = classify_failure(exc)
    if kind is FailureKind.TIMEOUT:
        return True
    if kind in (FailureKind.BACKEND_ERROR, FailureKind.HTTP_STATUS):
        return exc.response.status_code >= 500  # type: ignore[attr-defined]
    return False


def normalize_error(exc: BaseException, timeout_ms: int) -> ErrorDetail:
    """Map any failure to an :class:`ErrorDetail` (first matching kind wins)."""
    kind = classify_failure(exc)

    if kind is FailureKind.BACKEND_ERROR:
        response = exc.response  # type: ignore[attr-defined]
        body = _response_body(response)
        error = _structured_error(body) or {}
        return ErrorDetail(
            code=error.get("code") or SERVER_ERROR,
            message=error.get("message") or response.reason_phrase or str(exc),
            details=body,
        )

    if kind is FailureKind.HTTP_STATUS:
        response = exc.response  # type: ignore[attr-defined]
        return ErrorDetail(
            code=SERVER_ERROR,
            message=response.reason_phrase or str(exc),
            details=_response_body(response),
        )

    if kind is FailureKind.TIMEOUT:
        return ErrorDetail(code=TIMEOUT, message="Request timeout", details={"timeout": timeout_ms})

    if kind is FailureKind.NETWORK:
        return ErrorDetail(code=NETWORK_ERROR, message=str(exc) or type(exc).__name__)

    return ErrorDetail(code=UNKNOWN_ERROR, message=str(exc) or "Unknown error occurred")

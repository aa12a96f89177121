"""HTTP client for the Ads.txt Manager backend.

Single point of outbound communication: owns the base URL, timeout, retry
budget and error normalization. ``get`` / ``post`` never raise; they always
resolve to an :class:`ApiResponse`. ``get_raw`` raises :class:`ApiClientError`
so callers can wrap the failure with their own context.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from adstxt_mcp.api.errors import ApiClientError, classify_failure, is_retryable, normalize_error
from adstxt_mcp.config import settings
from adstxt_mcp.schemas.common import ApiResponse

logger = logging.getLogger("api.client")


class ApiClient:
    """Async wrapper around :class:`httpx.AsyncClient` with retry and backoff.

    Configuration is read-only after construction, so one instance is safely
    shared by every concurrent tool call.

    Attributes:
        base_url: Backend root, e.g. ``https://adstxt-manager.jp``.
        timeout_ms: Per-attempt timeout in milliseconds.
        retries: Additional attempts allowed for timeouts and 5xx responses.
        retry_base_delay: Backoff base in seconds (attempt N waits base * 2**N).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        retries: int | None = None,
        api_key: str | None = None,
        *,
        retry_base_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.api_base_url
        self.timeout_ms = settings.api_timeout if timeout_ms is None else timeout_ms
        self.retries = settings.api_retries if retries is None else retries
        self.retry_base_delay = (
            settings.api_retry_base_delay if retry_base_delay is None else retry_base_delay
        )
        if self.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.retries}")
        api_key = api_key if api_key is not None else settings.api_key

        headers = {
            "Accept": "application/json",
            "User-Agent": settings.user_agent,
        }
        if api_key:
            headers["X-API-Key"] = api_key

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout_ms / 1000),
            follow_redirects=True,
            headers=headers,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Retry loop
    # ------------------------------------------------------------------

    def backoff_delay(self, attempt: int) -> float:
        return self.retry_base_delay * (2**attempt)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one logical request, retrying timeouts and 5xx responses.

        Raises the last failure once the retry budget is spent.
        """
        for attempt in range(self.retries + 1):
            try:
                response = await self._client.request(method, path, **kwargs)
                response.raise_for_status()
                return response
            except httpx.HTTPError as exc:
                if attempt >= self.retries or not is_retryable(exc):
                    raise
                delay = self.backoff_delay(attempt)
                logger.warning(
                    "%s %s failed (%s), retry %d/%d in %.2fs",
                    method,
                    path,
                    classify_failure(exc).value,
                    attempt + 1,
                    self.retries,
                    delay,
                )
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover

    async def _request_envelope(self, method: str, path: str, **kwargs: Any) -> ApiResponse:
        try:
            response = await self._request(method, path, **kwargs)
            return ApiResponse.model_validate(response.json())
        except Exception as exc:
            error = normalize_error(exc, self.timeout_ms)
            logger.debug("%s %s -> %s: %s", method, path, error.code, error.message)
            return ApiResponse.failure(error)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get(self, path: str, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self._request_envelope("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> ApiResponse:
        return await self._request_envelope("POST", path, json=body)

    async def get_raw(self, path: str) -> str:
        """Fetch a non-JSON document (e.g. help markdown) as text."""
        try:
            response = await self._request("GET", path, headers={"Accept": "text/plain, */*"})
        except Exception as exc:
            raise ApiClientError(normalize_error(exc, self.timeout_ms)) from exc
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()


# Process-wide singleton shared by every tool handler.
api_client = ApiClient()

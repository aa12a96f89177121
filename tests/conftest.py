"""Shared pytest fixtures – a fake backend served through httpx.MockTransport."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio

from adstxt_mcp.api.client import ApiClient

BASE_URL = "https://backend.test"


def ok(data: Any, status: int = 200, **extra: Any) -> httpx.Response:
    """Successful backend envelope."""
    return httpx.Response(status, json={"success": True, "data": data, **extra})


def fail(code: str, message: str, status: int = 400) -> httpx.Response:
    """Backend envelope with a structured error."""
    return httpx.Response(
        status, json={"success": False, "error": {"code": code, "message": message}}
    )


class FakeBackend:
    """Records every request and answers from per-route response queues.

    A queued item is an ``httpx.Response``, an ``httpx`` exception class
    (raised with the request attached), or a callable taking the request.
    The last item of a queue is repeated once the others are used up.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Any]] = {}

    def route(self, method: str, path: str, *responses: Any) -> None:
        self._routes[(method, path)] = list(responses)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return fail("NOT_FOUND", f"No route for {request.method} {request.url.path}", 404)

        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, type) and issubclass(item, Exception):
            raise item("simulated failure", request=request)
        if callable(item):
            return item(request)
        # A fresh copy each time so a repeated response is never re-read after close
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def no_sleep():
    """Replace backoff sleeps with a mock that records the requested delays."""
    with patch("adstxt_mcp.api.client.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        yield mock_sleep


@pytest_asyncio.fixture
async def client(backend, no_sleep):
    """ApiClient wired to the fake backend (3 retries, 1s backoff base)."""
    api = ApiClient(
        base_url=BASE_URL,
        timeout_ms=5000,
        retries=3,
        api_key="test-key",
        retry_base_delay=1.0,
        transport=httpx.MockTransport(backend),
    )
    yield api
    await api.aclose()


@pytest.fixture
def tool_client(client):
    """Point the tool handlers at the fake-backend client."""
    with patch("adstxt_mcp.mcp.tools.api_client", client):
        yield client

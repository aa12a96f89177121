"""SSE (Server-Sent Events) transport for the ads.txt MCP server.

This module exposes the same tools over HTTP using SSE, which is useful
for web-based MCP clients, testing, and scenarios where stdio transport
is not available.

Run with:
    adstxt-mcp-sse            (or: python -m adstxt_mcp.mcp.sse_server)

The server starts on http://0.0.0.0:8000 by default.
SSE endpoint: GET  /sse
Message post: POST /messages
Health check: GET  /health
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND
from sse_starlette.sse import EventSourceResponse

from adstxt_mcp.api.client import api_client
from adstxt_mcp.config import settings
from adstxt_mcp.mcp.server import (
    call_tool,
    get_prompt,
    list_prompts,
    list_resources,
    list_tools,
    log_startup,
    read_resource,
)

logger = logging.getLogger("mcp.sse")

PROTOCOL_VERSION = "2024-11-05"

# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

# In-memory message queues keyed by session_id
_sessions: dict[str, asyncio.Queue] = {}
_session_counter = 0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown for the SSE application."""
    logger.info("MCP SSE transport starting on %s:%s", settings.sse_host, settings.sse_port)
    log_startup()
    yield
    logger.info("MCP SSE transport shutting down")
    _sessions.clear()
    await api_client.aclose()


app = FastAPI(
    title="Ads.txt Manager MCP Server – SSE Transport",
    version=settings.mcp_server_version,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "transport": "sse",
        "version": settings.mcp_server_version,
        "api_base_url": settings.api_base_url,
        "api_key_configured": bool(settings.api_key),
    }


# ---------------------------------------------------------------------------
# SSE endpoint
# ---------------------------------------------------------------------------


@app.get("/sse")
async def sse_endpoint(request: Request):
    """Server-Sent Events stream for MCP protocol messages.

    The client opens this endpoint to receive messages from the MCP
    server.  The client posts requests to ``/messages?session_id=<id>``
    and reads the server responses from this stream.
    """
    global _session_counter
    _session_counter += 1
    session_id = f"session-{_session_counter}"

    queue: asyncio.Queue = asyncio.Queue()
    _sessions[session_id] = queue

    async def event_generator():
        # First event: tell the client where to POST requests
        yield {
            "event": "endpoint",
            "data": f"/messages?session_id={session_id}",
        }

        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    message = await asyncio.wait_for(queue.get(), timeout=30.0)
                    yield {
                        "event": "message",
                        "data": json.dumps(message, default=str),
                    }
                except asyncio.TimeoutError:
                    yield {"comment": "keepalive"}
        finally:
            _sessions.pop(session_id, None)

    return EventSourceResponse(event_generator())


# ---------------------------------------------------------------------------
# JSON-RPC routing
# ---------------------------------------------------------------------------


def _rpc_result(rpc_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _rpc_error(rpc_id: Any, code: int, message: str, data: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": rpc_id, "error": error}


async def handle_rpc(body: dict[str, Any]) -> dict[str, Any]:
    """Route one JSON-RPC request to the shared MCP protocol handlers."""
    method = body.get("method", "")
    params = body.get("params") or {}
    rpc_id = body.get("id")

    try:
        if method == "initialize":
            return _rpc_result(
                rpc_id,
                {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": {
                        "tools": {"listChanged": False},
                        "resources": {"listChanged": False},
                        "prompts": {"listChanged": False},
                    },
                    "serverInfo": {
                        "name": settings.mcp_server_name,
                        "version": settings.mcp_server_version,
                    },
                },
            )

        if method == "tools/list":
            tools = await list_tools()
            return _rpc_result(
                rpc_id, {"tools": [t.model_dump(mode="json", exclude_none=True) for t in tools]}
            )

        if method == "tools/call":
            content = await call_tool(params.get("name", ""), params.get("arguments") or {})
            return _rpc_result(
                rpc_id, {"content": [c.model_dump(mode="json", exclude_none=True) for c in content]}
            )

        if method == "resources/list":
            resources = await list_resources()
            return _rpc_result(
                rpc_id,
                {"resources": [r.model_dump(mode="json", exclude_none=True) for r in resources]},
            )

        if method == "resources/read":
            uri = params.get("uri", "")
            text = await read_resource(uri)
            return _rpc_result(
                rpc_id, {"contents": [{"uri": uri, "text": text, "mimeType": "application/json"}]}
            )

        if method == "prompts/list":
            prompts = await list_prompts()
            return _rpc_result(
                rpc_id,
                {"prompts": [p.model_dump(mode="json", exclude_none=True) for p in prompts]},
            )

        if method == "prompts/get":
            messages = await get_prompt(params.get("name", ""), params.get("arguments") or {})
            return _rpc_result(
                rpc_id,
                {"messages": [m.model_dump(mode="json", exclude_none=True) for m in messages]},
            )

    except McpError as exc:
        return _rpc_error(rpc_id, exc.error.code, exc.error.message, exc.error.data)
    except ValueError as exc:
        return _rpc_error(rpc_id, INVALID_PARAMS, str(exc))

    return _rpc_error(rpc_id, METHOD_NOT_FOUND, f"Method '{method}' not found")


# ---------------------------------------------------------------------------
# Message endpoint (client → server)
# ---------------------------------------------------------------------------


@app.post("/messages")
async def messages_endpoint(request: Request, session_id: str):
    """Receive a JSON-RPC request from the client, process it, and
    push the response onto the SSE stream for the matching session.
    """
    queue = _sessions.get(session_id)
    if queue is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Session '{session_id}' not found. Connect to /sse first."},
        )

    body = await request.json()
    logger.debug("SSE recv session=%s body=%s", session_id, body)

    response = await handle_rpc(body)
    await queue.put(response)

    return Response(status_code=202, content="Accepted")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "adstxt_mcp.mcp.sse_server:app",
        host=settings.sse_host,
        port=settings.sse_port,
        reload=False,
    )


if __name__ == "__main__":
    main()

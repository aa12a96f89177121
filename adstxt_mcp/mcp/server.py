"""MCP server bootstrap – registers tools, resources, prompts and runs transports."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    CallToolRequest,
    CallToolResult,
    ErrorData,
    Prompt,
    PromptArgument,
    PromptMessage,
    Resource,
    ServerResult,
    TextContent,
    Tool,
)

from adstxt_mcp.api.client import api_client
from adstxt_mcp.config import settings
from adstxt_mcp.errors import ToolError
from adstxt_mcp.mcp.tools import (
    handle_get_adstxt_cache,
    handle_get_batch_domain_info,
    handle_get_domain_info,
    handle_get_error_help,
    handle_get_seller_by_id,
    handle_get_sellers_json,
    handle_get_sellers_json_metadata,
    handle_optimize_adstxt,
    handle_optimize_adstxt_by_domain,
    handle_search_sellers_batch,
    handle_validate_adstxt,
    handle_validate_adstxt_quick,
)
from adstxt_mcp.schemas.inputs import MAX_BATCH_DOMAINS, MAX_BATCH_SELLER_IDS
from adstxt_mcp.services.help_service import DEFAULT_ANCHOR, ERROR_CODE_ANCHORS

logger = logging.getLogger("mcp.server")

ERROR_CODES_URI = "adstxt://error-codes"

# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

_LEVEL_PROPERTY = {
    "type": "string",
    "enum": ["level1", "level2"],
    "description": "Optimization level (default: level1)",
    "default": "level1",
}

TOOL_DEFINITIONS: list[Tool] = [
    Tool(
        name="validate_adstxt_quick",
        description=(
            "Fast syntax-only validation without database queries (10-20x faster). "
            "Checks ads.txt format, detects duplicates, and provides detailed error messages."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "content": {
                    "type": "string",
                    "description": "The ads.txt file content to validate",
                    "minLength": 1,
                },
                "checkDuplicates": {
                    "type": "boolean",
                    "description": "Check for duplicate entries (default: true)",
                    "default": True,
                },
            },
            "required": ["content"],
        },
    ),
    Tool(
        name="validate_adstxt",
        description=(
            "Full ads.txt validation with sellers.json cross-checking. Validates syntax, "
            "format, and verifies account IDs against sellers.json."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "content": {
                    "type": "string",
                    "description": "The ads.txt file content to validate",
                    "minLength": 1,
                },
                "publisherDomain": {
                    "type": "string",
                    "description": "Optional publisher domain for cross-checking",
                },
            },
            "required": ["content"],
        },
    ),
    Tool(
        name="optimize_adstxt",
        description=(
            "Optimize ads.txt content. Level 1: remove duplicates, standardize format, "
            "group by domain. Level 2: Level 1 + sellers.json integration and categorization."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "content": {
                    "type": "string",
                    "description": "The ads.txt file content to optimize",
                    "minLength": 1,
                },
                "publisher_domain": {
                    "type": "string",
                    "description": "Optional publisher domain",
                },
                "level": _LEVEL_PROPERTY,
            },
            "required": ["content"],
        },
    ),
    Tool(
        name="optimize_adstxt_by_domain",
        description=(
            "Fetch the cached ads.txt of a publisher domain and optimize it in one step. "
            "Fails without optimizing when no ads.txt could be fetched for the domain."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {
                    "type": "string",
                    "description": "Publisher domain whose ads.txt should be optimized",
                    "minLength": 1,
                },
                "force": {
                    "type": "boolean",
                    "description": "Refetch ads.txt from the source first (default: false)",
                    "default": False,
                },
                "publisher_domain": {
                    "type": "string",
                    "description": "Publisher domain for optimization (default: domain)",
                },
                "level": _LEVEL_PROPERTY,
            },
            "required": ["domain"],
        },
    ),
    Tool(
        name="get_adstxt_cache",
        description=(
            "Retrieve cached ads.txt content for a domain from the database. "
            "Optionally force refresh from source."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {"type": "string", "description": "Publisher domain", "minLength": 1},
                "force": {
                    "type": "boolean",
                    "description": "Force refresh from source (default: false)",
                    "default": False,
                },
            },
            "required": ["domain"],
        },
    ),
    Tool(
        name="get_domain_info",
        description=(
            "Get comprehensive domain information (ads.txt + sellers.json status) "
            "in a single API call."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {"type": "string", "description": "Domain to query", "minLength": 1},
            },
            "required": ["domain"],
        },
    ),
    Tool(
        name="get_batch_domain_info",
        description=(
            f"Get information for multiple domains (up to {MAX_BATCH_DOMAINS}) "
            "in a single request."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domains": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": f"Array of domains to query (max {MAX_BATCH_DOMAINS})",
                    "minItems": 1,
                    "maxItems": MAX_BATCH_DOMAINS,
                },
            },
            "required": ["domains"],
        },
    ),
    Tool(
        name="get_sellers_json",
        description=(
            "Get full sellers.json data for an advertising system domain. "
            "Includes all seller records, contact information, and metadata."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {
                    "type": "string",
                    "description": "Ad system domain (e.g., google.com)",
                    "minLength": 1,
                },
            },
            "required": ["domain"],
        },
    ),
    Tool(
        name="get_sellers_json_metadata",
        description=(
            "Get sellers.json metadata only (no seller list). Fast check for availability, "
            "seller count, and contact information."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {"type": "string", "description": "Ad system domain", "minLength": 1},
            },
            "required": ["domain"],
        },
    ),
    Tool(
        name="search_sellers_batch",
        description=(
            "High-performance batch search for multiple seller IDs in a single domain. "
            f"Up to {MAX_BATCH_SELLER_IDS} IDs per request."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {"type": "string", "description": "Ad system domain", "minLength": 1},
                "seller_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": f"Array of seller IDs to search (max {MAX_BATCH_SELLER_IDS})",
                    "minItems": 1,
                    "maxItems": MAX_BATCH_SELLER_IDS,
                },
            },
            "required": ["domain", "seller_ids"],
        },
    ),
    Tool(
        name="get_seller_by_id",
        description=(
            "Search for a specific seller ID in an ad system's sellers.json. Returns seller "
            "details including type and confidentiality status."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {"type": "string", "description": "Ad system domain", "minLength": 1},
                "seller_id": {
                    "type": "string",
                    "description": "Seller ID to search",
                    "minLength": 1,
                },
            },
            "required": ["domain", "seller_id"],
        },
    ),
    Tool(
        name="get_error_help",
        description=(
            "Get detailed help information for ads.txt validation errors and warnings. "
            "Supports multiple languages (English, Japanese)."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "errorCode": {
                    "type": "string",
                    "description": 'Optional specific error code (e.g., "11010")',
                },
                "language": {
                    "type": "string",
                    "enum": ["en", "ja"],
                    "description": "Language for help content (default: en)",
                    "default": "en",
                },
            },
        },
    ),
]

TOOL_HANDLERS = {
    "validate_adstxt_quick": handle_validate_adstxt_quick,
    "validate_adstxt": handle_validate_adstxt,
    "optimize_adstxt": handle_optimize_adstxt,
    "optimize_adstxt_by_domain": handle_optimize_adstxt_by_domain,
    "get_adstxt_cache": handle_get_adstxt_cache,
    "get_domain_info": handle_get_domain_info,
    "get_batch_domain_info": handle_get_batch_domain_info,
    "get_sellers_json": handle_get_sellers_json,
    "get_sellers_json_metadata": handle_get_sellers_json_metadata,
    "search_sellers_batch": handle_search_sellers_batch,
    "get_seller_by_id": handle_get_seller_by_id,
    "get_error_help": handle_get_error_help,
}

# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


async def dispatch_tool(name: str, arguments: dict | None) -> Any:
    """Run tool *name* and return its result.

    Raises:
        McpError: ``METHOD_NOT_FOUND`` for unknown tools, ``INTERNAL_ERROR``
            for every other failure. Tool errors keep their ``code`` and
            ``details`` in ``ErrorData.data``.
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

    try:
        return await handler(arguments or {})
    except McpError:
        raise
    except ToolError as exc:
        logger.warning("tool %s failed: [%s] %s", name, exc.code, exc.message)
        raise McpError(
            ErrorData(code=INTERNAL_ERROR, message=exc.message, data=exc.to_dict())
        ) from exc
    except Exception as exc:
        logger.exception("tool %s raised unexpectedly", name)
        raise McpError(
            ErrorData(code=INTERNAL_ERROR, message=str(exc) or "Unknown error occurred")
        ) from exc


# ---------------------------------------------------------------------------
# Protocol handlers (shared by the stdio and SSE transports)
# ---------------------------------------------------------------------------


async def list_tools() -> list[Tool]:
    return TOOL_DEFINITIONS


async def call_tool(name: str, arguments: dict | None) -> list[TextContent]:
    result = await dispatch_tool(name, arguments)
    return [
        TextContent(
            type="text",
            text=json.dumps(result, indent=2, ensure_ascii=False, default=str),
        )
    ]


async def _handle_call_tool_request(req: CallToolRequest) -> ServerResult:
    """``tools/call`` handler that lets :class:`McpError` reach the session.

    The SDK's ``call_tool`` decorator folds every exception into an
    ``isError`` result, which drops the error code and ``data``.
    """
    content = await call_tool(req.params.name, req.params.arguments)
    return ServerResult(CallToolResult(content=content, isError=False))


async def list_resources() -> list[Resource]:
    """Expose reusable reference data for MCP clients."""
    return [
        Resource(
            uri=ERROR_CODES_URI,
            name="Validation Error Codes",
            description="Ads.txt validation error codes and their help anchors",
            mimeType="application/json",
        ),
    ]


async def read_resource(uri: str) -> str:
    if str(uri) == ERROR_CODES_URI:
        return json.dumps(
            {"anchors": ERROR_CODE_ANCHORS, "default_anchor": DEFAULT_ANCHOR},
            indent=2,
        )

    raise ValueError(f"Unknown resource: {uri}")


async def list_prompts() -> list[Prompt]:
    """Provide prompt templates for common ads.txt workflows."""
    return [
        Prompt(
            name="audit_domain",
            description="Audit a publisher's ads.txt against the referenced sellers.json files",
            arguments=[
                PromptArgument(
                    name="domain",
                    description="Publisher domain to audit (e.g. example.com)",
                    required=True,
                ),
            ],
        ),
        Prompt(
            name="explain_validation_error",
            description="Explain an ads.txt validation error code and how to fix it",
            arguments=[
                PromptArgument(
                    name="error_code",
                    description="Validation error code (e.g. 11010)",
                    required=True,
                ),
                PromptArgument(
                    name="language",
                    description="Help language, en or ja (default en)",
                    required=False,
                ),
            ],
        ),
    ]


async def get_prompt(name: str, arguments: dict | None = None) -> list[PromptMessage]:
    """Return a filled prompt template."""
    args = arguments or {}

    if name == "audit_domain":
        domain = args.get("domain", "example.com")
        return [
            PromptMessage(
                role="user",
                content=TextContent(
                    type="text",
                    text=(
                        f"Audit the ads.txt of {domain} using these steps:\n\n"
                        f"1. Use get_domain_info for {domain} to check ads.txt and sellers.json status\n"
                        "2. Use get_adstxt_cache to read the current ads.txt content\n"
                        "3. Run validate_adstxt on that content with the publisher domain\n"
                        "4. For each distinct error code, call get_error_help\n"
                        "5. Run optimize_adstxt_by_domain with level2 and summarise the changes\n\n"
                        "Report invalid lines, sellers.json mismatches, and recommended fixes."
                    ),
                ),
            )
        ]

    if name == "explain_validation_error":
        error_code = args.get("error_code", "")
        language = args.get("language") or "en"
        return [
            PromptMessage(
                role="user",
                content=TextContent(
                    type="text",
                    text=(
                        f"Call get_error_help with errorCode={error_code!r} and "
                        f"language={language!r}. Explain what the error means, show an "
                        "example of an offending ads.txt line, and give the corrected line."
                    ),
                ),
            )
        ]

    raise ValueError(f"Unknown prompt: {name}")


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_mcp_server() -> Server:
    """Create and configure the MCP server instance."""
    server = Server(settings.mcp_server_name, version=settings.mcp_server_version)

    server.list_tools()(list_tools)
    server.request_handlers[CallToolRequest] = _handle_call_tool_request
    server.list_resources()(list_resources)
    server.read_resource()(read_resource)
    server.list_prompts()(list_prompts)
    server.get_prompt()(get_prompt)

    return server


# ---------------------------------------------------------------------------
# Entry-point: run MCP server over stdio
# ---------------------------------------------------------------------------


def log_startup() -> None:
    logger.info("API Base URL: %s", settings.api_base_url)
    logger.info("API Key: %s", "***configured***" if settings.api_key else "***NOT SET***")
    if not settings.api_key:
        logger.warning("API_KEY environment variable is not set")
        logger.warning("Most API calls will fail without authentication")


async def run_mcp_server() -> None:
    """Start the MCP server using stdio transport."""
    server = create_mcp_server()
    logger.info(
        "Starting MCP server '%s' v%s (stdio)",
        settings.mcp_server_name,
        settings.mcp_server_version,
    )
    log_startup()

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await api_client.aclose()


def main() -> None:
    """CLI entry-point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    asyncio.run(run_mcp_server())


if __name__ == "__main__":
    main()

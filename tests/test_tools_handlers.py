"""Tests for MCP tool handlers (the full handler path through tools.py).

These drive each handler against the fake backend and check the exact
backend call it makes, that the backend's ``data`` comes back unchanged,
and how backend failures surface.
"""

from __future__ import annotations

import json

import httpx
import pytest

from adstxt_mcp.errors import BackendError
from adstxt_mcp.mcp.tools import (
    handle_get_adstxt_cache,
    handle_get_batch_domain_info,
    handle_get_domain_info,
    handle_get_seller_by_id,
    handle_get_sellers_json,
    handle_get_sellers_json_metadata,
    handle_optimize_adstxt,
    handle_search_sellers_batch,
    handle_validate_adstxt,
    handle_validate_adstxt_quick,
)

from conftest import fail, ok

ADS_TXT = "google.com, pub-123, DIRECT, f08c47fec0942fa0\n"


def _body(request: httpx.Request):
    return json.loads(request.content)


# ---------------------------------------------------------------------------
# Ads.txt validation / optimization
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_validate_quick_posts_content_and_default_duplicate_check(tool_client, backend):
    result_data = {"isValid": True, "records": [], "errors": [], "warnings": [], "statistics": {}}
    backend.route("POST", "/api/v1/adstxt/validate/quick", ok(result_data))

    result = await handle_validate_adstxt_quick({"content": ADS_TXT})

    assert result == result_data
    (request,) = backend.requests
    assert _body(request) == {"content": ADS_TXT, "checkDuplicates": True}


@pytest.mark.asyncio
async def test_validate_quick_forwards_check_duplicates_false(tool_client, backend):
    backend.route("POST", "/api/v1/adstxt/validate/quick", ok({"isValid": True}))

    await handle_validate_adstxt_quick({"content": ADS_TXT, "checkDuplicates": False})

    assert _body(backend.requests[0])["checkDuplicates"] is False


@pytest.mark.asyncio
async def test_validate_full_maps_publisher_domain(tool_client, backend):
    backend.route("POST", "/api/adsTxt/process", ok({"totalRecords": 1}))

    result = await handle_validate_adstxt({"content": ADS_TXT, "publisherDomain": "example.com"})

    assert result == {"totalRecords": 1}
    assert _body(backend.requests[0]) == {"content": ADS_TXT, "publisher_domain": "example.com"}


@pytest.mark.asyncio
async def test_validate_full_omits_absent_publisher_domain(tool_client, backend):
    backend.route("POST", "/api/adsTxt/process", ok({"totalRecords": 1}))

    await handle_validate_adstxt({"content": ADS_TXT})

    body = _body(backend.requests[0])
    assert body == {"content": ADS_TXT}
    assert "publisher_domain" not in body


@pytest.mark.asyncio
async def test_validate_failure_uses_backend_message(tool_client, backend):
    backend.route("POST", "/api/adsTxt/process", fail("UNAUTHORIZED", "Invalid API key", 401))

    with pytest.raises(BackendError) as excinfo:
        await handle_validate_adstxt({"content": ADS_TXT})

    assert str(excinfo.value) == "Invalid API key"
    assert excinfo.value.code == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_optimize_defaults_to_level1_without_publisher_key(tool_client, backend):
    backend.route("POST", "/api/adsTxt/optimize", ok({"optimized_content": ADS_TXT}))

    await handle_optimize_adstxt({"content": ADS_TXT})

    assert _body(backend.requests[0]) == {"content": ADS_TXT, "level": "level1"}


@pytest.mark.asyncio
async def test_optimize_level2_with_publisher(tool_client, backend):
    backend.route("POST", "/api/adsTxt/optimize", ok({"optimization_level": "level2"}))

    result = await handle_optimize_adstxt(
        {"content": ADS_TXT, "publisher_domain": "example.com", "level": "level2"}
    )

    assert result == {"optimization_level": "level2"}
    assert _body(backend.requests[0])["level"] == "level2"
    assert _body(backend.requests[0])["publisher_domain"] == "example.com"


@pytest.mark.asyncio
async def test_optimize_failure_without_message_uses_generic_text(tool_client, backend):
    backend.route(
        "POST",
        "/api/adsTxt/optimize",
        httpx.Response(200, json={"success": False, "error": {"code": "X", "message": ""}}),
    )

    with pytest.raises(BackendError) as excinfo:
        await handle_optimize_adstxt({"content": ADS_TXT})

    assert str(excinfo.value) == "Optimization failed"


@pytest.mark.asyncio
async def test_get_adstxt_cache_without_force(tool_client, backend):
    data = {"domain": "example.com", "content": ADS_TXT, "status": "success", "fetched_at": "t"}
    backend.route("GET", "/api/adsTxtCache/domain/example.com", ok(data))

    result = await handle_get_adstxt_cache({"domain": "example.com"})

    assert result == data
    assert "force" not in backend.requests[0].url.params


@pytest.mark.asyncio
async def test_get_adstxt_cache_with_force(tool_client, backend):
    backend.route("GET", "/api/adsTxtCache/domain/example.com", ok({"status": "success"}))

    await handle_get_adstxt_cache({"domain": "example.com", "force": True})

    assert backend.requests[0].url.params["force"] == "true"


# ---------------------------------------------------------------------------
# Domain information
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_domain_info(tool_client, backend):
    data = {"domain": "example.com", "ads_txt": {"exists": True}, "sellers_json": {"exists": False}}
    backend.route("GET", "/api/v1/domains/example.com/info", ok(data))

    assert await handle_get_domain_info({"domain": "example.com"}) == data


@pytest.mark.asyncio
async def test_get_batch_domain_info_posts_domains(tool_client, backend):
    backend.route("POST", "/api/v1/domains/batch/info", ok({"domains": [], "summary": {}}))

    await handle_get_batch_domain_info({"domains": ["a.com", "b.com"]})

    assert _body(backend.requests[0]) == {"domains": ["a.com", "b.com"]}


@pytest.mark.asyncio
async def test_domain_info_failure_falls_back_to_generic_message(tool_client, backend):
    backend.route("GET", "/api/v1/domains/example.com/info", httpx.Response(200, json={"success": False}))

    with pytest.raises(BackendError) as excinfo:
        await handle_get_domain_info({"domain": "example.com"})

    assert str(excinfo.value) == "Failed to fetch domain info"


# ---------------------------------------------------------------------------
# Sellers.json
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_sellers_json(tool_client, backend):
    data = {"domain": "google.com", "sellers_json": [{"seller_id": "pub-1", "is_confidential": 0}]}
    backend.route("GET", "/api/sellersJson/google.com", ok(data))

    assert await handle_get_sellers_json({"domain": "google.com"}) == data


@pytest.mark.asyncio
async def test_get_sellers_json_metadata(tool_client, backend):
    backend.route("GET", "/api/sellersJson/google.com/metadata", ok({"seller_count": 10}))

    assert await handle_get_sellers_json_metadata({"domain": "google.com"}) == {"seller_count": 10}


@pytest.mark.asyncio
async def test_search_sellers_batch(tool_client, backend):
    backend.route(
        "POST",
        "/api/v1/sellersjson/google.com/sellers/batch",
        ok({"found": [], "not_found": ["pub-1"], "execution_time_ms": 3}),
    )

    result = await handle_search_sellers_batch({"domain": "google.com", "seller_ids": ["pub-1"]})

    assert result["not_found"] == ["pub-1"]
    assert _body(backend.requests[0]) == {"seller_ids": ["pub-1"]}


@pytest.mark.asyncio
async def test_get_seller_by_id(tool_client, backend):
    backend.route(
        "GET",
        "/api/sellersJson/google.com/seller/pub-123",
        ok({"found": True, "seller": {"seller_id": "pub-123", "seller_type": "PUBLISHER"}}),
    )

    result = await handle_get_seller_by_id({"domain": "google.com", "seller_id": "pub-123"})

    assert result["found"] is True


@pytest.mark.asyncio
async def test_seller_id_is_percent_encoded(tool_client, backend):
    backend.route("GET", "/api/sellersJson/google.com/seller/a/b", ok({"found": False}))

    await handle_get_seller_by_id({"domain": "google.com", "seller_id": "a/b"})

    assert backend.requests[0].url.raw_path == b"/api/sellersJson/google.com/seller/a%2Fb"


@pytest.mark.asyncio
async def test_transport_failure_surfaces_normalized_message(tool_client, backend, no_sleep):
    backend.route("GET", "/api/sellersJson/slow.com", httpx.ReadTimeout)

    with pytest.raises(BackendError) as excinfo:
        await handle_get_sellers_json({"domain": "slow.com"})

    assert excinfo.value.code == "TIMEOUT"
    assert str(excinfo.value) == "Request timeout"


@pytest.mark.asyncio
async def test_error_without_code_surfaces_backend_message(tool_client, backend):
    backend.route(
        "GET",
        "/api/v1/domains/gone.com/info",
        httpx.Response(200, json={"success": False, "error": {"message": "Domain not found"}}),
    )

    with pytest.raises(BackendError) as excinfo:
        await handle_get_domain_info({"domain": "gone.com"})

    assert str(excinfo.value) == "Domain not found"
    assert "validation error" not in excinfo.value.message

"""Combined ads.txt + sellers.json status per domain."""

from __future__ import annotations

from typing import Any

from adstxt_mcp.api.client import ApiClient
from adstxt_mcp.services.envelope import segment, unwrap


async def get_domain_info(client: ApiClient, domain: str) -> Any:
    response = await client.get(f"/api/v1/domains/{segment(domain)}/info")
    return unwrap(response, "Failed to fetch domain info")


async def get_batch_domain_info(client: ApiClient, domains: list[str]) -> Any:
    response = await client.post("/api/v1/domains/batch/info", {"domains": domains})
    return unwrap(response, "Failed to fetch batch domain info")

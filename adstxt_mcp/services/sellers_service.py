"""Sellers.json lookups."""

from __future__ import annotations

from typing import Any

from adstxt_mcp.api.client import ApiClient
from adstxt_mcp.services.envelope import segment, unwrap


async def get_sellers_json(client: ApiClient, domain: str) -> Any:
    """Full sellers.json for an ad system domain, including every seller record."""
    response = await client.get(f"/api/sellersJson/{segment(domain)}")
    return unwrap(response, "Failed to fetch sellers.json")


async def get_sellers_json_metadata(client: ApiClient, domain: str) -> Any:
    """Metadata only: availability, seller count, contact details."""
    response = await client.get(f"/api/sellersJson/{segment(domain)}/metadata")
    return unwrap(response, "Failed to fetch sellers.json metadata")


async def search_sellers_batch(client: ApiClient, domain: str, seller_ids: list[str]) -> Any:
    response = await client.post(
        f"/api/v1/sellersjson/{segment(domain)}/sellers/batch",
        {"seller_ids": seller_ids},
    )
    return unwrap(response, "Batch search failed")


async def get_seller_by_id(client: ApiClient, domain: str, seller_id: str) -> Any:
    response = await client.get(
        f"/api/sellersJson/{segment(domain)}/seller/{segment(seller_id)}"
    )
    return unwrap(response, "Seller search failed")

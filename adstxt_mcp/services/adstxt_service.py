"""Ads.txt validation, optimization and cache operations."""

from __future__ import annotations

import logging
from typing import Any

from adstxt_mcp.api.client import ApiClient
from adstxt_mcp.errors import BackendError
from adstxt_mcp.schemas.adstxt import AdsTxtCacheResult
from adstxt_mcp.services.envelope import compact, segment, unwrap

logger = logging.getLogger("services.adstxt")


async def validate_quick(client: ApiClient, content: str, check_duplicates: bool = True) -> Any:
    """Syntax-only validation; no sellers.json lookups on the backend."""
    response = await client.post(
        "/api/v1/adstxt/validate/quick",
        {"content": content, "checkDuplicates": check_duplicates},
    )
    return unwrap(response, "Validation failed")


async def validate_full(client: ApiClient, content: str, publisher_domain: str | None = None) -> Any:
    """Full validation with sellers.json cross-checking."""
    response = await client.post(
        "/api/adsTxt/process",
        compact({"content": content, "publisher_domain": publisher_domain}),
    )
    return unwrap(response, "Validation failed")


async def optimize(
    client: ApiClient,
    content: str,
    publisher_domain: str | None = None,
    level: str = "level1",
) -> Any:
    """Optimize ads.txt content.

    ``level1`` removes duplicates, standardizes format and groups by domain;
    ``level2`` adds sellers.json integration and categorization.
    """
    response = await client.post(
        "/api/adsTxt/optimize",
        compact({"content": content, "publisher_domain": publisher_domain, "level": level}),
    )
    return unwrap(response, "Optimization failed")


async def get_cache(client: ApiClient, domain: str, force: bool = False) -> Any:
    """Return the backend's cached ads.txt for *domain*, optionally refetched."""
    response = await client.get(
        f"/api/adsTxtCache/domain/{segment(domain)}",
        params={"force": "true"} if force else None,
    )
    return unwrap(response, "Failed to fetch ads.txt cache")


async def optimize_by_domain(
    client: ApiClient,
    domain: str,
    force: bool = False,
    publisher_domain: str | None = None,
    level: str = "level1",
) -> dict[str, Any]:
    """Fetch a domain's cached ads.txt, then optimize it.

    The optimize call depends on the fetched content, so the two calls run in
    order and the second is skipped when the cache has nothing usable.
    """
    try:
        cached_data = await get_cache(client, domain, force=force)
    except BackendError as exc:
        raise BackendError(
            f"Failed to fetch ads.txt for {domain}: {exc.message}",
            code=exc.code,
            details=exc.details,
        ) from exc

    cached = AdsTxtCacheResult.model_validate(cached_data)
    if not cached.is_available or not cached.content:
        raise BackendError(
            f"ads.txt for {domain} is not available (status: {cached.status})",
            code="NOT_FOUND",
            details=cached_data,
        )

    logger.debug("optimize_by_domain domain=%s fetched_at=%s", domain, cached.fetched_at)
    result = await optimize(
        client,
        cached.content,
        publisher_domain=publisher_domain or domain,
        level=level,
    )
    return {**result, "domain": cached.domain or domain, "fetched_at": cached.fetched_at}

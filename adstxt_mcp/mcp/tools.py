"""MCP tool handlers – the bridge between MCP protocol and service layer.

Each handler validates the raw argument dict against its input model, calls
the service with the shared :data:`api_client` and returns the backend's
``data`` payload unchanged. Failures are raised as :class:`ToolError`.
"""

from __future__ import annotations

import logging
import time
from typing import Any, TypeVar

from pydantic import ValidationError

from adstxt_mcp.api.client import api_client
from adstxt_mcp.errors import ToolInputError
from adstxt_mcp.schemas.inputs import (
    AdsTxtCacheInput,
    BatchDomainInfoInput,
    DomainInput,
    DomainOptimizationInput,
    ErrorHelpInput,
    FullValidationInput,
    OptimizationInput,
    QuickValidationInput,
    SellerBatchInput,
    SellerLookupInput,
    ToolInput,
)
from adstxt_mcp.services import (
    adstxt_service,
    domain_service,
    help_service,
    sellers_service,
)

logger = logging.getLogger("mcp.tools")

InputT = TypeVar("InputT", bound=ToolInput)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse(tool: str, model: type[InputT], arguments: dict) -> InputT:
    """Validate *arguments* for *tool*; raise ToolInputError before any network call."""
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise ToolInputError.from_validation_error(tool, exc) from exc


def _elapsed(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000, 2)


# ---------------------------------------------------------------------------
# Ads.txt validation / optimization
# ---------------------------------------------------------------------------


async def handle_validate_adstxt_quick(arguments: dict) -> Any:
    """Syntax-only validation.

    Args:
        arguments: {"content": str, "checkDuplicates": bool (default true)}
    """
    t0 = time.perf_counter()
    params = _parse("validate_adstxt_quick", QuickValidationInput, arguments)

    data = await adstxt_service.validate_quick(
        api_client, params.content, check_duplicates=params.check_duplicates
    )

    logger.info(
        "validate_adstxt_quick chars=%d ms=%.1f", len(params.content), _elapsed(t0)
    )
    return data


async def handle_validate_adstxt(arguments: dict) -> Any:
    """Full validation with sellers.json cross-checking.

    Args:
        arguments: {"content": str, "publisherDomain": str (optional)}
    """
    t0 = time.perf_counter()
    params = _parse("validate_adstxt", FullValidationInput, arguments)

    data = await adstxt_service.validate_full(
        api_client, params.content, publisher_domain=params.publisher_domain
    )

    logger.info(
        "validate_adstxt chars=%d publisher=%s ms=%.1f",
        len(params.content),
        params.publisher_domain,
        _elapsed(t0),
    )
    return data


async def handle_optimize_adstxt(arguments: dict) -> Any:
    """Optimize supplied ads.txt content.

    Args:
        arguments: {"content": str, "publisher_domain": str (optional),
                    "level": "level1" | "level2" (default level1)}
    """
    t0 = time.perf_counter()
    params = _parse("optimize_adstxt", OptimizationInput, arguments)

    data = await adstxt_service.optimize(
        api_client,
        params.content,
        publisher_domain=params.publisher_domain,
        level=params.level,
    )

    logger.info("optimize_adstxt level=%s ms=%.1f", params.level, _elapsed(t0))
    return data


async def handle_optimize_adstxt_by_domain(arguments: dict) -> Any:
    """Fetch a domain's cached ads.txt and optimize it.

    Args:
        arguments: {"domain": str, "force": bool (default false),
                    "publisher_domain": str (optional),
                    "level": "level1" | "level2" (default level1)}
    """
    t0 = time.perf_counter()
    params = _parse("optimize_adstxt_by_domain", DomainOptimizationInput, arguments)

    data = await adstxt_service.optimize_by_domain(
        api_client,
        params.domain,
        force=params.force,
        publisher_domain=params.publisher_domain,
        level=params.level,
    )

    logger.info(
        "optimize_adstxt_by_domain domain=%s level=%s force=%s ms=%.1f",
        params.domain,
        params.level,
        params.force,
        _elapsed(t0),
    )
    return data


async def handle_get_adstxt_cache(arguments: dict) -> Any:
    """Return the cached ads.txt for a domain.

    Args:
        arguments: {"domain": str, "force": bool (default false)}
    """
    t0 = time.perf_counter()
    params = _parse("get_adstxt_cache", AdsTxtCacheInput, arguments)

    data = await adstxt_service.get_cache(api_client, params.domain, force=params.force)

    logger.info(
        "get_adstxt_cache domain=%s force=%s ms=%.1f", params.domain, params.force, _elapsed(t0)
    )
    return data


# ---------------------------------------------------------------------------
# Domain information
# ---------------------------------------------------------------------------


async def handle_get_domain_info(arguments: dict) -> Any:
    t0 = time.perf_counter()
    params = _parse("get_domain_info", DomainInput, arguments)

    data = await domain_service.get_domain_info(api_client, params.domain)

    logger.info("get_domain_info domain=%s ms=%.1f", params.domain, _elapsed(t0))
    return data


async def handle_get_batch_domain_info(arguments: dict) -> Any:
    """Status for up to 50 domains in one backend call.

    Args:
        arguments: {"domains": [str] (1-50)}
    """
    t0 = time.perf_counter()
    params = _parse("get_batch_domain_info", BatchDomainInfoInput, arguments)

    data = await domain_service.get_batch_domain_info(api_client, params.domains)

    logger.info(
        "get_batch_domain_info domains=%d ms=%.1f", len(params.domains), _elapsed(t0)
    )
    return data


# ---------------------------------------------------------------------------
# Sellers.json
# ---------------------------------------------------------------------------


async def handle_get_sellers_json(arguments: dict) -> Any:
    t0 = time.perf_counter()
    params = _parse("get_sellers_json", DomainInput, arguments)

    data = await sellers_service.get_sellers_json(api_client, params.domain)

    logger.info("get_sellers_json domain=%s ms=%.1f", params.domain, _elapsed(t0))
    return data


async def handle_get_sellers_json_metadata(arguments: dict) -> Any:
    t0 = time.perf_counter()
    params = _parse("get_sellers_json_metadata", DomainInput, arguments)

    data = await sellers_service.get_sellers_json_metadata(api_client, params.domain)

    logger.info("get_sellers_json_metadata domain=%s ms=%.1f", params.domain, _elapsed(t0))
    return data


async def handle_search_sellers_batch(arguments: dict) -> Any:
    """Look up to 100 seller IDs in one sellers.json.

    Args:
        arguments: {"domain": str, "seller_ids": [str] (1-100)}
    """
    t0 = time.perf_counter()
    params = _parse("search_sellers_batch", SellerBatchInput, arguments)

    data = await sellers_service.search_sellers_batch(
        api_client, params.domain, params.seller_ids
    )

    logger.info(
        "search_sellers_batch domain=%s ids=%d ms=%.1f",
        params.domain,
        len(params.seller_ids),
        _elapsed(t0),
    )
    return data


async def handle_get_seller_by_id(arguments: dict) -> Any:
    t0 = time.perf_counter()
    params = _parse("get_seller_by_id", SellerLookupInput, arguments)

    data = await sellers_service.get_seller_by_id(api_client, params.domain, params.seller_id)

    logger.info(
        "get_seller_by_id domain=%s seller_id=%s ms=%.1f",
        params.domain,
        params.seller_id,
        _elapsed(t0),
    )
    return data


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------


async def handle_get_error_help(arguments: dict) -> dict:
    """Return help for validation warnings, narrowed to one code when given.

    Args:
        arguments: {"errorCode": str (optional), "language": "en" | "ja" (default en)}
    """
    t0 = time.perf_counter()
    params = _parse("get_error_help", ErrorHelpInput, arguments)

    result = await help_service.get_error_help(
        api_client, language=params.language, error_code=params.error_code
    )

    logger.info(
        "get_error_help code=%s lang=%s narrowed=%s ms=%.1f",
        params.error_code,
        params.language,
        result.url is not None,
        _elapsed(t0),
    )
    return result.model_dump(exclude_none=True)

"""Validation-warning help: fetch the warnings document and narrow it to one code."""

from __future__ import annotations

import re

from adstxt_mcp.api.client import ApiClient
from adstxt_mcp.api.errors import ApiClientError
from adstxt_mcp.errors import BackendError
from adstxt_mcp.schemas.help import ErrorHelpResult

DEFAULT_ANCHOR = "invalid-format"

# Validation error code -> anchor id in warnings.md
ERROR_CODE_ANCHORS: dict[str, str] = {
    "10010": "file-not-found",
    "10020": "invalid-content-type",
    "10030": "timeout",
    "10040": "too-many-redirects",
    "10050": "too-many-redirects",
    "11010": "missing-fields",
    "11020": "invalid-relationship",
    "11030": "invalid-domain",
    "11040": "no-valid-entries",
    "11050": "whitespace-in-fields",
    "12010": "no-sellers-json",
    "12020": "direct-account-id-not-in-sellers-json",
    "12030": "domain-mismatch",
    "12040": "direct-not-publisher",
    "12050": "direct-not-publisher",
    "12060": "seller-id-not-unique",
    "13010": "no-sellers-json",
    "13020": "reseller-account-id-not-in-sellers-json",
    "13030": "domain-mismatch",
    "13040": "reseller-not-intermediary",
    "13050": "reseller-not-intermediary",
    "13060": "seller-id-not-unique",
    "14020": "invalid-subdomain-url",
    "14030": "invalid-subdomain",
    "14040": "invalid-subdomain-ads-txt",
    "14050": "subdomain-not-listed",
    "14060": "subdomain-contains-subdomains",
    "15020": "invalid-inventory-partner-domain",
    "15030": "inventory-partner-contains-partners",
    "16010": "invalid-manager-domain",
    "16020": "multiple-manager-domains-without-country",
    "16030": "invalid-country-code",
    "16040": "manager-without-sellers-json",
    "16050": "manager-without-entry",
    "16060": "manager-not-direct",
    "16070": "manager-sellers-json-without-id",
    "16080": "manager-sellers-json-domain-mismatch",
    "16090": "manager-sellers-json-not-publisher",
    "17010": "invalid-owner-domain",
    "17020": "multiple-owner-domains",
    "17030": "owner-domain-mismatch",
}

_LEVEL3_HEADING = re.compile(r"^###(?!#)")


def get_anchor_id(error_code: str) -> str:
    return ERROR_CODE_ANCHORS.get(error_code, DEFAULT_ANCHOR)


def extract_error_section(content: str, error_code: str) -> str | None:
    """Return the ``###`` section whose body mentions ``(Code: <error_code>)``.

    The section runs from the nearest level-3 heading at or above the first
    matching line up to (not including) the next level-3 heading. Returns
    ``None`` when no line matches or no heading precedes the match.
    """
    marker = re.compile(rf"\(Code: {re.escape(error_code)}\)", re.IGNORECASE)
    lines = content.split("\n")

    hit = next((i for i, line in enumerate(lines) if marker.search(line)), None)
    if hit is None:
        return None

    start = next((j for j in range(hit, -1, -1) if _LEVEL3_HEADING.match(lines[j])), None)
    if start is None:
        return None

    end = next(
        (j for j in range(hit + 1, len(lines)) if _LEVEL3_HEADING.match(lines[j])),
        len(lines),
    )
    return "\n".join(lines[start:end]).strip()


async def get_error_help(
    client: ApiClient,
    language: str = "en",
    error_code: str | None = None,
) -> ErrorHelpResult:
    """Fetch ``warnings.md`` for *language*; narrow it to *error_code* when it is found."""
    path = f"/help/{language}/warnings.md"
    try:
        content = await client.get_raw(path)
    except ApiClientError as exc:
        raise BackendError(
            f"Failed to fetch error help: {exc.error.message}",
            code=exc.error.code,
            details=exc.error.details,
        ) from exc

    if error_code:
        section = extract_error_section(content, error_code)
        if section is not None:
            url = f"{client.base_url.rstrip('/')}{path}#{get_anchor_id(error_code)}"
            return ErrorHelpResult(content=section, url=url)

    return ErrorHelpResult(content=content)

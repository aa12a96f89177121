"""Input models for every MCP tool.

Field names, optionality and bounds are the wire contract advertised in the
tool JSON schemas. camelCase argument names are kept through aliases.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_BATCH_DOMAINS = 50
MAX_BATCH_SELLER_IDS = 100

OptimizationLevel = Literal["level1", "level2"]
HelpLanguage = Literal["en", "ja"]


class ToolInput(BaseModel):
    """Base for tool arguments: strict types, unknown keys ignored."""

    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)


class QuickValidationInput(ToolInput):
    content: str = Field(..., min_length=1)
    check_duplicates: bool = Field(True, alias="checkDuplicates")


class FullValidationInput(ToolInput):
    content: str = Field(..., min_length=1)
    publisher_domain: str | None = Field(None, alias="publisherDomain")


class OptimizationInput(ToolInput):
    content: str = Field(..., min_length=1)
    publisher_domain: str | None = None
    level: OptimizationLevel = "level1"


class DomainOptimizationInput(ToolInput):
    domain: str = Field(..., min_length=1)
    force: bool = False
    publisher_domain: str | None = None
    level: OptimizationLevel = "level1"


class AdsTxtCacheInput(ToolInput):
    domain: str = Field(..., min_length=1)
    force: bool = False


class DomainInput(ToolInput):
    """Single-domain lookups (domain info, sellers.json and its metadata)."""

    domain: str = Field(..., min_length=1)


class BatchDomainInfoInput(ToolInput):
    domains: list[str] = Field(..., min_length=1, max_length=MAX_BATCH_DOMAINS)


class SellerBatchInput(ToolInput):
    domain: str = Field(..., min_length=1)
    seller_ids: list[str] = Field(..., min_length=1, max_length=MAX_BATCH_SELLER_IDS)


class SellerLookupInput(ToolInput):
    domain: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)


class ErrorHelpInput(ToolInput):
    error_code: str | None = Field(None, alias="errorCode")
    language: HelpLanguage = "en"

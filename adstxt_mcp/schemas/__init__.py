"""Pydantic schemas for envelopes, tool inputs and locally read results."""

from adstxt_mcp.schemas.common import ApiResponse, ErrorDetail
from adstxt_mcp.schemas.adstxt import AdsTxtCacheResult
from adstxt_mcp.schemas.help import ErrorHelpResult
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
)

__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "AdsTxtCacheResult",
    "ErrorHelpResult",
    "AdsTxtCacheInput",
    "BatchDomainInfoInput",
    "DomainInput",
    "DomainOptimizationInput",
    "ErrorHelpInput",
    "FullValidationInput",
    "OptimizationInput",
    "QuickValidationInput",
    "SellerBatchInput",
    "SellerLookupInput",
]

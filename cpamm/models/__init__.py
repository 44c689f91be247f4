"""Pydantic models and shared value types."""

from cpamm.models.api import (
    AddLiquidityRequest,
    CreatePoolRequest,
    CreateTokenRequest,
    ErrorResponse,
    PoolView,
    PriceView,
    SwapRequest,
    SwapResponse,
    TokenBalance,
)
from cpamm.models.types import TokenName, Uint64, validate_token_name, validate_uint64

__all__ = [
    # Types
    "TokenName",
    "Uint64",
    "validate_token_name",
    "validate_uint64",
    # Requests
    "CreateTokenRequest",
    "CreatePoolRequest",
    "AddLiquidityRequest",
    "SwapRequest",
    # Responses
    "TokenBalance",
    "PoolView",
    "PriceView",
    "SwapResponse",
    "ErrorResponse",
]

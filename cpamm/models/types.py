"""Shared type definitions for amounts and token names.

Used by the pool engine for argument checks and by the API models for
request validation.
"""

from typing import Annotated, Any

from pydantic import Field

from cpamm.constants import UINT64_MAX


def validate_uint64(value: Any) -> int:
    """Validate that a value is an unsigned 64-bit integer.

    Args:
        value: Value to validate

    Returns:
        The value as int

    Raises:
        ValueError: If value is not an int (bools are rejected) or is outside [0, 2^64-1]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Uint64 must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint64 cannot be negative: {value}")
    if value > UINT64_MAX:
        raise ValueError(f"Uint64 overflow: {value} > 2^64-1")
    return value


def validate_token_name(value: Any) -> str:
    """Validate that a value is a non-empty token name.

    Raises:
        ValueError: If value is not a non-empty string
    """
    if not isinstance(value, str):
        raise ValueError(f"Token name must be a string, got {type(value).__name__}")
    if not value:
        raise ValueError("Token name cannot be empty")
    return value


# 64-bit unsigned integer (JSON integer, strict: no strings or floats)
Uint64 = Annotated[
    int,
    Field(strict=True, ge=0, le=UINT64_MAX, description="64-bit unsigned integer"),
]

# Token name
TokenName = Annotated[
    str,
    Field(min_length=1, max_length=256, description="Token name"),
]

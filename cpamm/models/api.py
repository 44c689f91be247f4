"""Pydantic models for the HTTP service requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from cpamm.errors import ErrorKind
from cpamm.models.types import TokenName, Uint64
from cpamm.pools.types import PoolSnapshot, PoolState


class CreateTokenRequest(BaseModel):
    """Register a new token."""

    name: TokenName


class TokenBalance(BaseModel):
    """A token and its tracked balance."""

    name: str
    balance: int = Field(description="Total amount held by the pools")


class CreatePoolRequest(BaseModel):
    """Create a pool with initial reserves (0, 0 for an empty pool)."""

    token_a: TokenName
    token_b: TokenName
    reserve_a: Uint64 = 0
    reserve_b: Uint64 = 0


class AddLiquidityRequest(BaseModel):
    """Deposit into an existing pool."""

    amount_a: Uint64
    amount_b: Uint64


class SwapRequest(BaseModel):
    """Swap an exact input amount."""

    from_token: TokenName
    to_token: TokenName
    amount_in: Uint64
    min_amount_out: Uint64 = Field(default=0, description="Slippage limit")


class SwapResponse(BaseModel):
    """Executed (or quoted) swap."""

    from_token: str
    to_token: str
    amount_in: int
    amount_out: int


class PoolView(BaseModel):
    """Reserves and state of a pool."""

    token_a: str
    token_b: str
    reserve_a: int
    reserve_b: int
    invariant: int
    state: PoolState

    @classmethod
    def from_snapshot(cls, snapshot: PoolSnapshot) -> PoolView:
        return cls(
            token_a=snapshot.token_a,
            token_b=snapshot.token_b,
            reserve_a=snapshot.reserve_a,
            reserve_b=snapshot.reserve_b,
            invariant=snapshot.invariant,
            state=snapshot.state,
        )


class PriceView(BaseModel):
    """Price of token_a in token_b units.

    price is numerator * scale // denominator; all zero for an unknown or
    unseeded pool.
    """

    token_a: str
    token_b: str
    price: int
    numerator: int
    denominator: int
    scale: int


class ErrorResponse(BaseModel):
    """Body returned for a rejected request."""

    detail: str
    error: ErrorKind

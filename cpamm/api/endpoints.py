"""API endpoints for the AMM service."""

import os
import secrets
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, Header, status

from cpamm.config import PoolConfig
from cpamm.errors import NotFoundError, WriteAccessError
from cpamm.facade import SwapFacade
from cpamm.models.api import (
    AddLiquidityRequest,
    CreatePoolRequest,
    CreateTokenRequest,
    PoolView,
    PriceView,
    SwapRequest,
    SwapResponse,
    TokenBalance,
)
from cpamm.pools.types import PairKey

logger = structlog.get_logger()

router = APIRouter()

# Shared secret for mutating requests; when unset every caller may write
WRITE_KEY = os.environ.get("AMM_WRITE_KEY") or None

# Swap fee for pools created by the service
FEE_BPS = int(os.environ.get("AMM_FEE_BPS", "0"))


@lru_cache(maxsize=1)
def get_facade() -> SwapFacade:
    """Dependency provider for the market instance.

    Override this in tests to inject a fresh market:
        app.dependency_overrides[get_facade] = lambda: SwapFacade()
    """
    return SwapFacade(config=PoolConfig(fee_bps=FEE_BPS))


def get_write_key() -> str | None:
    """Dependency provider for the write key (overridable in tests)."""
    return WRITE_KEY


def require_write_access(
    x_write_key: str | None = Header(default=None),
    write_key: str | None = Depends(get_write_key),
) -> None:
    """Reject mutating requests that do not carry the configured write key."""
    if write_key is None:
        return
    if x_write_key is None or not secrets.compare_digest(x_write_key, write_key):
        raise WriteAccessError("Missing or invalid X-Write-Key header")


@router.post(
    "/tokens",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_write_access)],
)
def create_token(
    request: CreateTokenRequest,
    facade: SwapFacade = Depends(get_facade),
) -> TokenBalance:
    """Register a new token with a zero balance."""
    token = facade.add_token(request.name)
    return TokenBalance(name=token.name, balance=token.balance)


@router.get("/tokens/{name}/balance")
def get_token_balance(name: str, facade: SwapFacade = Depends(get_facade)) -> TokenBalance:
    """Balance of a token (0 for an unknown token)."""
    return TokenBalance(name=name, balance=facade.get_token_balance(name))


@router.post(
    "/pools",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_write_access)],
)
def create_pool(
    request: CreatePoolRequest,
    facade: SwapFacade = Depends(get_facade),
) -> PoolView:
    """Create a pool and deposit its initial reserves."""
    pool = facade.add_liquidity_pool(
        request.token_a, request.token_b, request.reserve_a, request.reserve_b
    )
    return PoolView.from_snapshot(pool.snapshot())


@router.get("/pools/{token_a}/{token_b}")
def get_pool(token_a: str, token_b: str, facade: SwapFacade = Depends(get_facade)) -> PoolView:
    """Reserves of a pool."""
    snapshot = facade.get_pool_reserves(token_a, token_b)
    if snapshot is None:
        raise NotFoundError(f"Pool {PairKey(token_a, token_b)} not found")
    return PoolView.from_snapshot(snapshot)


@router.get("/pools/{token_a}/{token_b}/price")
def get_price(token_a: str, token_b: str, facade: SwapFacade = Depends(get_facade)) -> PriceView:
    """Price of token_a in token_b units.

    Unknown and unseeded pools report zeros instead of an error, matching the
    balance query.
    """
    price = facade.get_price(token_a, token_b)
    scale = facade.config.price_scale
    if price is None or price.is_zero:
        return PriceView(
            token_a=token_a, token_b=token_b, price=0, numerator=0, denominator=0, scale=scale
        )
    return PriceView(
        token_a=token_a,
        token_b=token_b,
        price=price.scaled(scale),
        numerator=price.numerator,
        denominator=price.denominator,
        scale=scale,
    )


@router.post("/pools/{token_a}/{token_b}/liquidity", dependencies=[Depends(require_write_access)])
def add_liquidity(
    token_a: str,
    token_b: str,
    request: AddLiquidityRequest,
    facade: SwapFacade = Depends(get_facade),
) -> PoolView:
    """Deposit into a pool."""
    facade.add_liquidity(token_a, token_b, request.amount_a, request.amount_b)
    snapshot = facade.get_pool_reserves(token_a, token_b)
    if snapshot is None:
        raise NotFoundError(f"Pool {PairKey(token_a, token_b)} not found")
    return PoolView.from_snapshot(snapshot)


@router.post("/pools/{token_a}/{token_b}/swap", dependencies=[Depends(require_write_access)])
def swap(
    token_a: str,
    token_b: str,
    request: SwapRequest,
    facade: SwapFacade = Depends(get_facade),
) -> SwapResponse:
    """Swap an exact input through a pool."""
    amount_out = facade.swap_the_token(
        token_a,
        token_b,
        request.from_token,
        request.to_token,
        request.amount_in,
        request.min_amount_out,
    )
    return SwapResponse(
        from_token=request.from_token,
        to_token=request.to_token,
        amount_in=request.amount_in,
        amount_out=amount_out,
    )


@router.post("/pools/{token_a}/{token_b}/quote")
def quote(
    token_a: str,
    token_b: str,
    request: SwapRequest,
    facade: SwapFacade = Depends(get_facade),
) -> SwapResponse:
    """Quote a swap without executing it."""
    amount_out = facade.quote_swap(
        token_a,
        token_b,
        request.from_token,
        request.to_token,
        request.amount_in,
        request.min_amount_out,
    )
    return SwapResponse(
        from_token=request.from_token,
        to_token=request.to_token,
        amount_in=request.amount_in,
        amount_out=amount_out,
    )

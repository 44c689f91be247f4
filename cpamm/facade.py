"""Swap facade: name-keyed operations over tokens and pools.

SwapFacade owns a TokenRegistry and a PoolRegistry and is the single object
callers talk to. Read-only queries resolve unknown names to 0 / None; every
mutating operation raises an AMMError subclass on failure so a failed deposit
or swap is never mistaken for success.
"""

from __future__ import annotations

import structlog

from cpamm.amm.base import Price
from cpamm.amm.constant_product import ConstantProduct, constant_product
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import AlreadyExistsError, InvalidArgumentError
from cpamm.pools.pool import LiquidityPool
from cpamm.pools.registry import PoolRegistry
from cpamm.pools.types import PairKey, PoolSnapshot
from cpamm.tokens import Token, TokenRegistry

logger = structlog.get_logger()


class SwapFacade:
    """Entry point for token, liquidity and swap operations.

    Each instance is an independent market: there is no module-level state, so
    tests and services can hold as many as they need.

    Args:
        config: Pool configuration applied to every pool created here
        amm: Curve math shared by the pools (default: ConstantProduct)
    """

    def __init__(
        self,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        amm: ConstantProduct | None = None,
    ) -> None:
        self.config = config
        self.amm = amm if amm is not None else constant_product
        self.tokens = TokenRegistry()
        self.pools = PoolRegistry()

    # --- Tokens ---

    def add_token(self, name: str) -> Token:
        """Register a token with a zero balance.

        Raises:
            AlreadyExistsError: If the name is taken
            InvalidArgumentError: If the name is empty
        """
        return self.tokens.add_token(name)

    def get_token_balance(self, name: str) -> int:
        """Balance of a token, 0 if the token is unknown."""
        return self.tokens.get_balance(name)

    # --- Pools ---

    def add_liquidity_pool(
        self,
        token_a: str,
        token_b: str,
        reserve_a: int,
        reserve_b: int,
    ) -> LiquidityPool:
        """Create the pool (token_a, token_b) with initial reserves.

        The initial reserves are deposited like any other liquidity, so both
        token balances are credited. Zero reserves create an empty pool that
        is seeded by a later add_liquidity.

        Raises:
            NotFoundError: If either token is unknown
            InvalidArgumentError: If both names are the same token
            AlreadyExistsError: If the pool exists
            AmountOverflowError: If a token balance would exceed u64
        """
        if token_a == token_b:
            raise InvalidArgumentError(f"Pool needs two distinct tokens, got {token_a} twice")
        key = PairKey(token_a, token_b)
        if key in self.pools:
            logger.warning("pool_already_exists", pool=str(key))
            raise AlreadyExistsError(f"Pool {key} already exists")
        pool = LiquidityPool(
            self.tokens.require(token_a),
            self.tokens.require(token_b),
            config=self.config,
            amm=self.amm,
            ledger_lock=self.tokens.lock,
        )
        # Validate and apply the deposit before the pool becomes visible
        pool.add_liquidity(reserve_a, reserve_b)
        try:
            self.pools.add_pool(pool)
        except AlreadyExistsError:
            # Lost a race with a concurrent add_liquidity_pool for the same key
            self._undo_deposit(pool, reserve_a, reserve_b)
            raise
        return pool

    def _undo_deposit(self, pool: LiquidityPool, amount_a: int, amount_b: int) -> None:
        with self.tokens.lock:
            pool.token_a.debit(amount_a)
            pool.token_b.debit(amount_b)

    def add_liquidity(self, token_a: str, token_b: str, amount_a: int, amount_b: int) -> None:
        """Deposit into the pool (token_a, token_b).

        Raises:
            NotFoundError: If the pool is unknown
            InvalidArgumentError, DepositRatioError, AmountOverflowError:
                see LiquidityPool.add_liquidity
        """
        pool = self.pools.require_pool(token_a, token_b)
        with self.pools.lock_for(pool.key):
            pool.add_liquidity(amount_a, amount_b)

    def calculate_price(self, token_a: str, token_b: str) -> int:
        """Fixed-point price of token_a in token_b units.

        Scaled by config.price_scale and truncated. Returns 0 for an unknown
        or unseeded pool.
        """
        price = self.get_price(token_a, token_b)
        if price is None:
            return 0
        return price.scaled(self.config.price_scale)

    def get_price(self, token_a: str, token_b: str) -> Price | None:
        """Exact price of the pool (token_a, token_b), None if unknown."""
        pool = self.pools.get_pool(token_a, token_b)
        if pool is None:
            logger.debug("price_unknown_pool", pool=str(PairKey(token_a, token_b)))
            return None
        with self.pools.lock_for(pool.key):
            return pool.calculate_price()

    def get_pool_reserves(self, token_a: str, token_b: str) -> PoolSnapshot | None:
        """Consistent snapshot of a pool's reserves, None if unknown."""
        pool = self.pools.get_pool(token_a, token_b)
        if pool is None:
            return None
        with self.pools.lock_for(pool.key):
            return pool.snapshot()

    # --- Swaps ---

    def swap_the_token(
        self,
        token_a: str,
        token_b: str,
        from_token: str,
        to_token: str,
        amount: int,
        min_amount_out: int = 0,
    ) -> int:
        """Swap `amount` of from_token for to_token through pool (token_a, token_b).

        Returns:
            Amount of to_token paid out

        Raises:
            NotFoundError: If the pool is unknown
            TokenMismatchError, ZeroReserveError, InsufficientLiquidityError,
            SlippageError: see LiquidityPool.swap_tokens
        """
        pool = self.pools.require_pool(token_a, token_b)
        with self.pools.lock_for(pool.key):
            result = pool.swap_tokens(from_token, to_token, amount, min_amount_out)
        return result.amount_out

    def quote_swap(
        self,
        token_a: str,
        token_b: str,
        from_token: str,
        to_token: str,
        amount: int,
        min_amount_out: int = 0,
    ) -> int:
        """Output swap_the_token would produce right now, without executing.

        Raises:
            Same as swap_the_token
        """
        pool = self.pools.require_pool(token_a, token_b)
        with self.pools.lock_for(pool.key):
            return pool.quote_swap(from_token, to_token, amount, min_amount_out).amount_out

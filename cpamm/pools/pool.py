"""Liquidity pool: reserves, curve constant and swap execution.

A pool pairs two tokens from a TokenRegistry. Its reserves are the amounts of
each token it holds; depositing or swapping moves the token balances by the
same amounts as the reserves, so in a single-pool setup reserve == balance.

Every mutating operation computes and range checks all new values first and
only then assigns them, so a rejected call leaves the pool and both tokens
untouched.

The pool is not thread-safe on its own; PoolRegistry hands out one lock per
pool and the facade holds it around every call.
"""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager
from typing import Any

import structlog

from cpamm.amm.base import Price, SwapResult
from cpamm.amm.constant_product import ConstantProduct, constant_product
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.constants import BPS_DENOMINATOR
from cpamm.errors import (
    AmountOverflowError,
    DepositRatioError,
    InsufficientLiquidityError,
    InvalidArgumentError,
    SlippageError,
    TokenMismatchError,
    ZeroReserveError,
)
from cpamm.models.types import validate_uint64
from cpamm.pools.types import PairKey, PoolSnapshot, PoolState
from cpamm.safe_int import S, Uint64Overflow
from cpamm.tokens import Token

logger = structlog.get_logger()


def _check_amount(name: str, value: int) -> int:
    try:
        return validate_uint64(value)
    except ValueError as err:
        raise InvalidArgumentError(f"{name}: {err}") from err


def _add_reserve(name: str, reserve: int, amount: int) -> int:
    try:
        return (S(reserve) + S(amount)).to_uint64()
    except Uint64Overflow as err:
        raise AmountOverflowError(f"{name} reserve overflows u64: {reserve} + {amount}") from err


class LiquidityPool:
    """Constant product pool for an ordered token pair.

    Attributes:
        token_a: First token (price base)
        token_b: Second token (price quote)
        reserve_a: Amount of token_a held by the pool
        reserve_b: Amount of token_b held by the pool
        invariant: Curve constant k; raised to reserve_a * reserve_b when a
            liquidity event lifts the product above it, never lowered
    """

    def __init__(
        self,
        token_a: Token,
        token_b: Token,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        amm: ConstantProduct | None = None,
        ledger_lock: AbstractContextManager[Any] | None = None,
    ) -> None:
        """Create an empty pool.

        Args:
            token_a: First token of the pair
            token_b: Second token of the pair
            config: Fee and deposit tolerance settings
            amm: Curve math (default: the shared ConstantProduct instance)
            ledger_lock: Lock guarding token balances shared with other pools.
                TokenRegistry.lock when built by the facade.

        Raises:
            InvalidArgumentError: If both sides are the same token
        """
        if token_a is token_b or token_a.name == token_b.name:
            raise InvalidArgumentError(f"Pool needs two distinct tokens, got {token_a.name} twice")
        self.token_a = token_a
        self.token_b = token_b
        self.reserve_a = 0
        self.reserve_b = 0
        self.invariant = 0
        self.config = config
        self.amm = amm if amm is not None else constant_product
        self._ledger_lock: AbstractContextManager[Any] = (
            ledger_lock if ledger_lock is not None else threading.RLock()
        )

    def __repr__(self) -> str:
        return (
            f"LiquidityPool({self.key}, reserve_a={self.reserve_a}, "
            f"reserve_b={self.reserve_b}, state={self.state.value})"
        )

    @property
    def key(self) -> PairKey:
        return PairKey(self.token_a.name, self.token_b.name)

    @property
    def state(self) -> PoolState:
        if self.reserve_a > 0 and self.reserve_b > 0:
            return PoolState.SEEDED
        return PoolState.EMPTY

    @property
    def is_seeded(self) -> bool:
        return self.state is PoolState.SEEDED

    def snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            key=self.key,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            invariant=self.invariant,
            state=self.state,
        )

    # --- Liquidity ---

    def add_liquidity(self, amount_a: int, amount_b: int) -> None:
        """Deposit amount_a of token_a and amount_b of token_b.

        Reserves and token balances grow by exactly the deposited amounts and
        the curve constant rises to the new reserve product if that is larger.
        k never decreases, so rounding slack left by earlier swaps stays in the
        pool and a zero deposit changes nothing. The first deposit that makes
        both reserves positive seeds the pool.

        Without a deposit tolerance any ratio is accepted.

        Raises:
            InvalidArgumentError: If an amount is not a u64
            DepositRatioError: If a tolerance is configured and the deposit
                ratio deviates from the pool ratio by more than it
            AmountOverflowError: If a reserve or balance would exceed u64
        """
        _check_amount("amount_a", amount_a)
        _check_amount("amount_b", amount_b)
        self._check_deposit_ratio(amount_a, amount_b)

        was_seeded = self.is_seeded
        new_reserve_a = _add_reserve(self.token_a.name, self.reserve_a, amount_a)
        new_reserve_b = _add_reserve(self.token_b.name, self.reserve_b, amount_b)

        with self._ledger_lock:
            new_balance_a = self.token_a.balance_after_credit(amount_a)
            new_balance_b = self.token_b.balance_after_credit(amount_b)

            self.token_a.balance = new_balance_a
            self.token_b.balance = new_balance_b
            self.reserve_a = new_reserve_a
            self.reserve_b = new_reserve_b
            self.invariant = max(self.invariant, new_reserve_a * new_reserve_b)

        logger.info(
            "liquidity_added",
            pool=str(self.key),
            amount_a=amount_a,
            amount_b=amount_b,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
        )
        if not was_seeded and self.is_seeded:
            logger.info("pool_seeded", pool=str(self.key))

    def _check_deposit_ratio(self, amount_a: int, amount_b: int) -> None:
        """Reject deposits off the pool ratio by more than the tolerance.

        Compares amount_b with the value-equal amount_a * reserve_b / reserve_a
        by cross-multiplication. Only applies to seeded pools.
        """
        tolerance_bps = self.config.deposit_tolerance_bps
        if tolerance_bps is None or not self.is_seeded:
            return
        if amount_a == 0 and amount_b == 0:
            return

        expected = S(amount_a) * S(self.reserve_b)
        actual = S(amount_b) * S(self.reserve_a)
        deviation = (actual - expected) if actual >= expected else (expected - actual)
        if not expected or deviation * S(BPS_DENOMINATOR) > expected * S(tolerance_bps):
            logger.warning(
                "deposit_ratio_rejected",
                pool=str(self.key),
                amount_a=amount_a,
                amount_b=amount_b,
                reserve_a=self.reserve_a,
                reserve_b=self.reserve_b,
                tolerance_bps=tolerance_bps,
            )
            raise DepositRatioError(
                f"Deposit {amount_a}:{amount_b} deviates from pool ratio "
                f"{self.reserve_a}:{self.reserve_b} by more than {tolerance_bps} bps"
            )

    # --- Pricing ---

    def calculate_price(self) -> Price:
        """Price of token_a in units of token_b (reserve_b / reserve_a).

        Returns Price.ZERO for an unseeded pool instead of dividing by zero.
        """
        return self.amm.spot_price(self.reserve_a, self.reserve_b)

    def price_of(self, token: str) -> Price:
        """Price of either pool token in units of the other one.

        Raises:
            TokenMismatchError: If token is not in the pool
        """
        if token == self.token_a.name:
            return self.amm.spot_price(self.reserve_a, self.reserve_b)
        if token == self.token_b.name:
            return self.amm.spot_price(self.reserve_b, self.reserve_a)
        raise TokenMismatchError(f"Token {token} not in pool {self.key}")

    # --- Swaps ---

    def _orient(self, from_token: str, to_token: str) -> tuple[Token, Token, int, int]:
        """Resolve swap direction to (token_in, token_out, reserve_in, reserve_out).

        Raises:
            TokenMismatchError: If (from_token, to_token) is not (a, b) or (b, a)
        """
        a, b = self.token_a, self.token_b
        if from_token == a.name and to_token == b.name:
            return a, b, self.reserve_a, self.reserve_b
        if from_token == b.name and to_token == a.name:
            return b, a, self.reserve_b, self.reserve_a
        raise TokenMismatchError(f"Swap {from_token} -> {to_token} does not match pool {self.key}")

    def quote_swap(
        self,
        from_token: str,
        to_token: str,
        amount_in: int,
        min_amount_out: int = 0,
    ) -> SwapResult:
        """Compute a swap without executing it.

        Args:
            from_token: Token paid into the pool
            to_token: Token taken out of the pool
            amount_in: Exact input amount
            min_amount_out: Smallest acceptable output (slippage limit)

        Returns:
            SwapResult with the output amount and post-swap reserves

        Raises:
            InvalidArgumentError: If an amount is not a u64
            TokenMismatchError: If the tokens do not match the pool
            ZeroReserveError: If the pool is not seeded
            InsufficientLiquidityError: If the output would drain reserve_out
            SlippageError: If the output is below min_amount_out
            AmountOverflowError: If the input reserve would exceed u64
        """
        _check_amount("amount_in", amount_in)
        _check_amount("min_amount_out", min_amount_out)
        token_in, token_out, reserve_in, reserve_out = self._orient(from_token, to_token)

        if amount_in == 0:
            return SwapResult(
                amount_in=0,
                amount_out=0,
                pool=str(self.key),
                token_in=token_in.name,
                token_out=token_out.name,
                reserve_in=reserve_in,
                reserve_out=reserve_out,
            )

        if not self.is_seeded:
            raise ZeroReserveError(f"Pool {self.key} has no liquidity")

        amount_out = self.amm.get_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            invariant=self.invariant,
            fee_multiplier=self.config.fee_multiplier,
        )
        if amount_out >= reserve_out:
            raise InsufficientLiquidityError(
                f"Swapping {amount_in} {token_in.name} would drain {reserve_out} "
                f"{token_out.name} from pool {self.key}"
            )
        if amount_out < min_amount_out:
            raise SlippageError(
                f"Swap output {amount_out} {token_out.name} below minimum {min_amount_out}"
            )

        return SwapResult(
            amount_in=amount_in,
            amount_out=amount_out,
            pool=str(self.key),
            token_in=token_in.name,
            token_out=token_out.name,
            reserve_in=_add_reserve(token_in.name, reserve_in, amount_in),
            reserve_out=reserve_out - amount_out,
        )

    def swap_tokens(
        self,
        from_token: str,
        to_token: str,
        amount_in: int,
        min_amount_out: int = 0,
    ) -> SwapResult:
        """Swap amount_in of from_token for to_token.

        The input reserve and from_token balance grow by amount_in, the output
        reserve and to_token balance shrink by amount_out. A zero input is a
        no-op returning zero output.

        Raises:
            Same as quote_swap, plus InsufficientBalanceError / AmountOverflowError
            if a token balance would leave the u64 range
        """
        try:
            result = self.quote_swap(from_token, to_token, amount_in, min_amount_out)
        except (
            InsufficientLiquidityError,
            SlippageError,
            ZeroReserveError,
            TokenMismatchError,
        ) as err:
            logger.warning(
                "swap_rejected",
                pool=str(self.key),
                from_token=from_token,
                to_token=to_token,
                amount_in=amount_in,
                reason=err.kind.value,
            )
            raise

        if result.amount_in == 0:
            return result

        token_in, token_out, _, _ = self._orient(from_token, to_token)
        with self._ledger_lock:
            new_balance_in = token_in.balance_after_credit(result.amount_in)
            new_balance_out = token_out.balance_after_debit(result.amount_out)

            token_in.balance = new_balance_in
            token_out.balance = new_balance_out
            if token_in is self.token_a:
                self.reserve_a, self.reserve_b = result.reserve_in, result.reserve_out
            else:
                self.reserve_b, self.reserve_a = result.reserve_in, result.reserve_out
            # Fees leave the reserve product above k; let the curve absorb them
            self.invariant = max(self.invariant, self.reserve_a * self.reserve_b)

        logger.info(
            "swap_executed",
            pool=str(self.key),
            token_in=result.token_in,
            token_out=result.token_out,
            amount_in=result.amount_in,
            amount_out=result.amount_out,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
        )
        return result

    def quote_amount_in(self, to_token: str, amount_out: int) -> int:
        """Smallest input of the other token that yields at least amount_out.

        Raises:
            TokenMismatchError: If to_token is not in the pool
            ZeroReserveError: If the pool is not seeded
            InsufficientLiquidityError: If amount_out >= the output reserve
        """
        _check_amount("amount_out", amount_out)
        if to_token == self.token_b.name:
            from_token = self.token_a.name
        elif to_token == self.token_a.name:
            from_token = self.token_b.name
        else:
            raise TokenMismatchError(f"Token {to_token} not in pool {self.key}")
        _, _, reserve_in, reserve_out = self._orient(from_token, to_token)

        if amount_out == 0:
            return 0
        if not self.is_seeded:
            raise ZeroReserveError(f"Pool {self.key} has no liquidity")

        amount_in = self.amm.get_amount_in(
            amount_out,
            reserve_in,
            reserve_out,
            invariant=self.invariant,
            fee_multiplier=self.config.fee_multiplier,
        )
        if amount_in is None:
            raise InsufficientLiquidityError(
                f"Pool {self.key} cannot pay out {amount_out} {to_token} (reserve {reserve_out})"
            )
        return amount_in

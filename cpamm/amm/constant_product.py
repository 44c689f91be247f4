"""Constant product AMM math.

The pool keeps the product of its reserves on the curve x * y = k.
A swap moves the input reserve to x' = x + amount_in and the output reserve
to the largest integer y' with x' * y' <= k:

    y' = k // x'
    amount_out = y - y'

Rounding the new output reserve down means the pool never ends up above its
curve, and because k is only reset by liquidity events, repeated swaps do not
let rounding drift accumulate in the swapper's favour.
"""

from __future__ import annotations

from cpamm.amm.base import AMM, Price
from cpamm.constants import BPS_DENOMINATOR
from cpamm.safe_int import S


class ConstantProduct(AMM):
    """Constant product math with an optional input fee.

    With a fee, only amount_in * fee_multiplier / 10000 moves along the curve
    while the whole input is added to the reserve.
    """

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        invariant: int | None = None,
        fee_multiplier: int = BPS_DENOMINATOR,
    ) -> int:
        """Calculate output amount using the constant product curve.

        Formula: amount_out = reserve_out - k // (reserve_in + amount_in * fee / 10000)

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            invariant: Curve constant k (default: reserve_in * reserve_out)
            fee_multiplier: 10000 - fee_bps (default 10000, no fee)

        Returns:
            Output token amount. Equals reserve_out when the input would
            drain the pool; callers must reject that.
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        k = S(invariant) if invariant is not None else S(reserve_in) * S(reserve_out)
        effective_in = S(amount_in) * S(fee_multiplier) // S(BPS_DENOMINATOR)
        new_reserve_out = k // (S(reserve_in) + effective_in)

        # k may sit above the reserve product; never hand out a negative amount
        return (S(reserve_out) - new_reserve_out.min(reserve_out)).value

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        invariant: int | None = None,
        fee_multiplier: int = BPS_DENOMINATOR,
    ) -> int | None:
        """Calculate the smallest input that yields at least amount_out.

        The output reserve may fall to y - amount_out, so the input reserve must
        reach the smallest x' with k // x' <= y - amount_out, which is
        k // (y - amount_out + 1) + 1.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            invariant: Curve constant k (default: reserve_in * reserve_out)
            fee_multiplier: 10000 - fee_bps (default 10000, no fee)

        Returns:
            Required input amount, or None if amount_out >= reserve_out
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return None
        if amount_out >= reserve_out:
            # Can't extract the whole reserve
            return None

        k = S(invariant) if invariant is not None else S(reserve_in) * S(reserve_out)
        target_reserve_in = k // (S(reserve_out) - S(amount_out) + S(1)) + S(1)
        effective_in = S(target_reserve_in.value - reserve_in).max(1)

        # Undo the fee: smallest amount_in with amount_in * fee // 10000 >= effective_in
        return (effective_in * S(BPS_DENOMINATOR)).ceiling_div(fee_multiplier).value

    def spot_price(self, reserve_base: int, reserve_quote: int) -> Price:
        """Price of the base token in quote units (reserve_quote / reserve_base).

        Returns Price.ZERO when either reserve is empty.
        """
        if reserve_base <= 0 or reserve_quote <= 0:
            return Price.ZERO
        return Price(numerator=reserve_quote, denominator=reserve_base)


# Singleton instance
constant_product = ConstantProduct()


__all__ = [
    "ConstantProduct",
    "constant_product",
]

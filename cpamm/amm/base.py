"""Base classes for AMM implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class SwapResult:
    """Result of executing or quoting a swap through a pool."""

    amount_in: int
    amount_out: int
    pool: str
    token_in: str
    token_out: str
    # Reserves after the swap (unchanged pool state for quotes)
    reserve_in: int
    reserve_out: int


@dataclass(frozen=True)
class Price:
    """Exchange rate as an exact fraction.

    For a pool (A, B) the price of A in terms of B is reserve_b / reserve_a.
    Keeping numerator and denominator avoids the precision loss of integer
    division; use scaled() for a fixed-point integer.
    """

    numerator: int
    denominator: int

    # Sentinel for pools that cannot be priced (0 / 1)
    ZERO: ClassVar[Price]

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    def scaled(self, scale: int) -> int:
        """Fixed-point price: numerator * scale // denominator.

        Truncates toward zero, so fractions below 1/scale are lost.
        """
        if self.denominator == 0:
            return 0
        return self.numerator * scale // self.denominator

    def as_decimal(self) -> Decimal:
        """Price as a Decimal (exact up to the context precision)."""
        if self.denominator == 0:
            return Decimal(0)
        return Decimal(self.numerator) / Decimal(self.denominator)


Price.ZERO = Price(numerator=0, denominator=1)


class AMM(ABC):
    """Abstract base class for AMM pricing math.

    Implementations are stateless: reserves (and, for curve-based AMMs, the
    curve constant) are passed in, amounts are returned.
    """

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount
        """
        ...

    @abstractmethod
    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int | None:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Required input token amount, or None if the output is unreachable
        """
        ...

    @abstractmethod
    def spot_price(self, reserve_base: int, reserve_quote: int) -> Price:
        """Marginal price of the base token in units of the quote token."""
        ...

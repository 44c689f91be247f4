"""Pool configuration."""

from dataclasses import dataclass

from cpamm.constants import BPS_DENOMINATOR, PRICE_SCALE


@dataclass(frozen=True)
class PoolConfig:
    """Configuration shared by every pool of a facade.

    Attributes:
        fee_bps: Swap fee in basis points kept by the pool (default: 0, no fee)
        deposit_tolerance_bps: Maximum deviation of a deposit's ratio from the
            pool's reserve ratio, in basis points. None disables the check and
            any amounts are accepted.
        price_scale: Fixed-point scale for integer prices (default: 1e9)
    """

    fee_bps: int = 0
    deposit_tolerance_bps: int | None = None
    price_scale: int = PRICE_SCALE

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {self.fee_bps}")
        if self.deposit_tolerance_bps is not None and self.deposit_tolerance_bps < 0:
            raise ValueError(
                f"deposit_tolerance_bps must be non-negative: {self.deposit_tolerance_bps}"
            )
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")

    @property
    def fee_multiplier(self) -> int:
        """Share of the input that moves the curve (10000 - fee_bps).

        For 0 bps this returns 10000, for 30 bps (0.3%) 9970.
        """
        return BPS_DENOMINATOR - self.fee_bps


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()

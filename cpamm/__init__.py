"""Constant product AMM - token registry, liquidity pools and swaps."""

__version__ = "0.1.0"

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig  # noqa: E402
from cpamm.facade import SwapFacade  # noqa: E402

__all__ = ["SwapFacade", "PoolConfig", "DEFAULT_POOL_CONFIG", "__version__"]

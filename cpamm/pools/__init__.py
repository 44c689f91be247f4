"""Pool management package.

Provides LiquidityPool and the PoolRegistry that owns them.
"""

from .pool import LiquidityPool
from .registry import PoolRegistry
from .types import PairKey, PoolSnapshot, PoolState

__all__ = [
    "LiquidityPool",
    "PoolRegistry",
    "PairKey",
    "PoolSnapshot",
    "PoolState",
]

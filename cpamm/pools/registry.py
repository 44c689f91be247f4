"""Pool registry for constant product pools.

Pools are keyed by a directional PairKey: registering ("A", "B") does not make
("B", "A") resolvable. Each pool gets its own lock so callers can serialize
operations on one pool without blocking the others.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

import structlog

from cpamm.errors import AlreadyExistsError, NotFoundError
from cpamm.pools.pool import LiquidityPool
from cpamm.pools.types import PairKey

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of liquidity pools keyed by (token_a, token_b)."""

    def __init__(self, pools: list[LiquidityPool] | None = None) -> None:
        """Initialize the registry with optional pools.

        Args:
            pools: Initial pools. If None, starts empty.
        """
        self._pools: dict[PairKey, LiquidityPool] = {}
        self._locks: dict[PairKey, threading.RLock] = {}
        # Guards the two dicts above, not the pools themselves
        self._registry_lock = threading.Lock()

        if pools:
            for pool in pools:
                self.add_pool(pool)

    def add_pool(self, pool: LiquidityPool) -> None:
        """Add a pool to the registry.

        Raises:
            AlreadyExistsError: If a pool with the same key exists. Replacing it
                would discard the reserves already credited to its tokens.
        """
        key = pool.key
        with self._registry_lock:
            if key in self._pools:
                logger.warning("pool_already_exists", pool=str(key))
                raise AlreadyExistsError(f"Pool {key} already exists")
            self._pools[key] = pool
            self._locks[key] = threading.RLock()
        logger.info("pool_added", pool=str(key))

    def get_pool(self, token_a: str, token_b: str) -> LiquidityPool | None:
        """Get the pool for (token_a, token_b), order sensitive.

        Returns:
            LiquidityPool if found, None otherwise
        """
        return self._pools.get(PairKey(token_a, token_b))

    def require_pool(self, token_a: str, token_b: str) -> LiquidityPool:
        """Get the pool for (token_a, token_b).

        Raises:
            NotFoundError: If no pool is registered under this exact key
        """
        pool = self.get_pool(token_a, token_b)
        if pool is None:
            raise NotFoundError(f"Pool {PairKey(token_a, token_b)} not found")
        return pool

    def lock_for(self, key: PairKey) -> threading.RLock:
        """Lock serializing operations on one pool.

        Raises:
            NotFoundError: If the key is unknown
        """
        lock = self._locks.get(key)
        if lock is None:
            raise NotFoundError(f"Pool {key} not found")
        return lock

    def keys(self) -> list[PairKey]:
        return list(self._pools)

    @property
    def pool_count(self) -> int:
        """Number of registered pools."""
        return len(self._pools)

    def __contains__(self, key: object) -> bool:
        return key in self._pools

    def __iter__(self) -> Iterator[LiquidityPool]:
        return iter(list(self._pools.values()))

    def __len__(self) -> int:
        return len(self._pools)

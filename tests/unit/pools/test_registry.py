"""Tests for PoolRegistry."""

import threading

import pytest

from cpamm.errors import AlreadyExistsError, NotFoundError
from cpamm.pools import PoolRegistry
from cpamm.pools.pool import LiquidityPool
from cpamm.pools.types import PairKey
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_C, make_pool


@pytest.fixture
def pool_ab() -> LiquidityPool:
    return make_pool(1000, 2000)


@pytest.fixture
def pool_bc() -> LiquidityPool:
    return make_pool(500, 500, token_a=TOKEN_B, token_b=TOKEN_C)


class TestPoolRegistryBasics:
    """Tests for adding and looking up pools."""

    def test_empty_registry(self):
        registry = PoolRegistry()
        assert registry.pool_count == 0
        assert len(registry) == 0
        assert registry.get_pool(TOKEN_A, TOKEN_B) is None

    def test_init_with_pools(self, pool_ab: LiquidityPool, pool_bc: LiquidityPool):
        registry = PoolRegistry([pool_ab, pool_bc])
        assert registry.pool_count == 2
        assert registry.keys() == [PairKey(TOKEN_A, TOKEN_B), PairKey(TOKEN_B, TOKEN_C)]
        assert list(registry) == [pool_ab, pool_bc]

    def test_get_pool(self, pool_ab: LiquidityPool):
        registry = PoolRegistry([pool_ab])
        assert registry.get_pool(TOKEN_A, TOKEN_B) is pool_ab
        assert PairKey(TOKEN_A, TOKEN_B) in registry

    def test_lookup_is_directional(self, pool_ab: LiquidityPool):
        """("A", "B") does not resolve ("B", "A")."""
        registry = PoolRegistry([pool_ab])
        assert registry.get_pool(TOKEN_B, TOKEN_A) is None
        assert PairKey(TOKEN_B, TOKEN_A) not in registry

    def test_reverse_pair_is_a_separate_pool(self, pool_ab: LiquidityPool):
        reverse = make_pool(10, 20, token_a=TOKEN_B, token_b=TOKEN_A)
        registry = PoolRegistry([pool_ab, reverse])
        assert registry.get_pool(TOKEN_A, TOKEN_B) is pool_ab
        assert registry.get_pool(TOKEN_B, TOKEN_A) is reverse

    def test_duplicate_rejected(self, pool_ab: LiquidityPool):
        """Registering the same key twice keeps the first pool."""
        registry = PoolRegistry([pool_ab])
        with pytest.raises(AlreadyExistsError):
            registry.add_pool(make_pool(1, 1))
        assert registry.get_pool(TOKEN_A, TOKEN_B) is pool_ab
        assert registry.pool_count == 1

    def test_delimiter_in_token_names(self):
        """Keys are tuples, so "A-B" + "C" and "A" + "B-C" stay distinct."""
        first = make_pool(1, 1, token_a="A-B", token_b="C")
        second = make_pool(2, 2, token_a="A", token_b="B-C")
        registry = PoolRegistry([first, second])
        assert str(first.key) == str(second.key)
        assert registry.get_pool("A-B", "C") is first
        assert registry.get_pool("A", "B-C") is second


class TestRequirePool:
    """Tests for PoolRegistry.require_pool and lock_for."""

    def test_require_existing(self, pool_ab: LiquidityPool):
        assert PoolRegistry([pool_ab]).require_pool(TOKEN_A, TOKEN_B) is pool_ab

    def test_require_missing(self, pool_ab: LiquidityPool):
        registry = PoolRegistry([pool_ab])
        with pytest.raises(NotFoundError):
            registry.require_pool(TOKEN_B, TOKEN_A)

    def test_lock_per_pool(self, pool_ab: LiquidityPool, pool_bc: LiquidityPool):
        registry = PoolRegistry([pool_ab, pool_bc])
        lock_ab = registry.lock_for(pool_ab.key)
        assert lock_ab is registry.lock_for(PairKey(TOKEN_A, TOKEN_B))
        assert lock_ab is not registry.lock_for(pool_bc.key)

    def test_lock_is_reentrant(self, pool_ab: LiquidityPool):
        lock = PoolRegistry([pool_ab]).lock_for(pool_ab.key)
        with lock:
            with lock:
                pass

    def test_lock_for_unknown_pool(self):
        with pytest.raises(NotFoundError):
            PoolRegistry().lock_for(PairKey(TOKEN_A, TOKEN_B))

    def test_other_pool_not_blocked(self, pool_ab: LiquidityPool, pool_bc: LiquidityPool):
        """Holding one pool's lock does not block another pool's lock."""
        registry = PoolRegistry([pool_ab, pool_bc])
        acquired = []

        def grab_other() -> None:
            lock = registry.lock_for(pool_bc.key)
            acquired.append(lock.acquire(timeout=1))
            lock.release()

        with registry.lock_for(pool_ab.key):
            worker = threading.Thread(target=grab_other)
            worker.start()
            worker.join()

        assert acquired == [True]

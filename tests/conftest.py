"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from cpamm.api.endpoints import get_facade, get_write_key
from cpamm.api.main import app
from cpamm.facade import SwapFacade
from cpamm.pools.pool import LiquidityPool
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_C, make_facade


@pytest.fixture
def facade() -> SwapFacade:
    """An empty market."""
    return SwapFacade()


@pytest.fixture
def seeded_facade() -> SwapFacade:
    """A market with tokens A, B, C and pool A-B seeded with (1000, 1000)."""
    return make_facade(pools=[(TOKEN_A, TOKEN_B, 1000, 1000)], extra_tokens=[TOKEN_C])


@pytest.fixture
def seeded_pool(seeded_facade: SwapFacade) -> LiquidityPool:
    """Pool A-B with reserves (1000, 1000)."""
    pool = seeded_facade.pools.get_pool(TOKEN_A, TOKEN_B)
    assert pool is not None
    return pool


@pytest.fixture
def api_facade() -> SwapFacade:
    """Market injected into the API for one test."""
    return SwapFacade()


@pytest.fixture
def client(api_facade: SwapFacade):
    """Create a test client bound to a fresh market, without a write key."""
    app.dependency_overrides[get_facade] = lambda: api_facade
    app.dependency_overrides[get_write_key] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()

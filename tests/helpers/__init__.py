"""Test helpers module for shared test utilities.

- constants: Token names used across tests
- factories: Market and pool factory functions
"""

from tests.helpers.constants import TOKEN_A, TOKEN_B, TOKEN_C
from tests.helpers.factories import make_facade, make_pool

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    # Factories
    "make_facade",
    "make_pool",
]

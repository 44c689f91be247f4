"""Pool identity and state types."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class PairKey(NamedTuple):
    """Directional pool key: (token_a, token_b) and (token_b, token_a) differ.

    The tuple is the identity; str() is only for logs and paths, so a token
    literally named "A-B" cannot collide with the pair ("A", "B").
    """

    token_a: str
    token_b: str

    def __str__(self) -> str:
        return f"{self.token_a}-{self.token_b}"


class PoolState(str, Enum):
    """Whether a pool can price and swap."""

    # Either reserve is zero: only accepts liquidity
    EMPTY = "empty"
    # Both reserves positive
    SEEDED = "seeded"


@dataclass(frozen=True)
class PoolSnapshot:
    """Point-in-time copy of a pool's reserves."""

    key: PairKey
    reserve_a: int
    reserve_b: int
    # Curve constant; never below reserve_a * reserve_b
    invariant: int
    state: PoolState

    @property
    def token_a(self) -> str:
        return self.key.token_a

    @property
    def token_b(self) -> str:
        return self.key.token_b

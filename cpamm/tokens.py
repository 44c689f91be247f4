"""Token registry.

Tokens are plain named balances. The balance is the total amount of the token
held by all pools that reference it; there is no per-account bookkeeping.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass

import structlog

from cpamm.errors import (
    AlreadyExistsError,
    AmountOverflowError,
    InsufficientBalanceError,
    InvalidArgumentError,
    NotFoundError,
)
from cpamm.safe_int import S, Uint64Overflow, Underflow

logger = structlog.get_logger()


@dataclass(eq=False)
class Token:
    """A named token and its tracked balance (u64)."""

    name: str
    balance: int = 0

    def balance_after_credit(self, amount: int) -> int:
        """Balance that crediting `amount` would produce.

        Raises:
            AmountOverflowError: If the result does not fit in a u64
        """
        try:
            return (S(self.balance) + S(amount)).to_uint64()
        except Uint64Overflow as err:
            raise AmountOverflowError(
                f"Crediting {amount} to {self.name} overflows u64 (balance {self.balance})"
            ) from err

    def balance_after_debit(self, amount: int) -> int:
        """Balance that debiting `amount` would produce.

        Raises:
            InsufficientBalanceError: If the balance would go negative
        """
        try:
            return (S(self.balance) - S(amount)).value
        except Underflow as err:
            raise InsufficientBalanceError(
                f"Cannot debit {amount} from {self.name} (balance {self.balance})"
            ) from err

    def credit(self, amount: int) -> None:
        self.balance = self.balance_after_credit(amount)

    def debit(self, amount: int) -> None:
        self.balance = self.balance_after_debit(amount)


class TokenRegistry:
    """Registry of tokens keyed by name.

    The registry owns its Token instances; pools hold references to them.
    `lock` serializes balance updates across pools that share a token.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, Token] = {}
        self.lock = threading.RLock()

    def add_token(self, name: str) -> Token:
        """Register a new token with a zero balance.

        Duplicates are rejected rather than overwritten: replacing the Token
        object would orphan the references held by existing pools.

        Raises:
            InvalidArgumentError: If name is empty
            AlreadyExistsError: If a token with this name exists
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"Token name must be a non-empty string: {name!r}")
        with self.lock:
            if name in self._tokens:
                logger.warning("token_already_exists", token=name)
                raise AlreadyExistsError(f"Token {name} already exists")
            token = Token(name=name)
            self._tokens[name] = token
        logger.info("token_added", token=name)
        return token

    def get(self, name: str) -> Token | None:
        return self._tokens.get(name)

    def require(self, name: str) -> Token:
        """Get a token by name.

        Raises:
            NotFoundError: If the token is unknown
        """
        token = self._tokens.get(name)
        if token is None:
            raise NotFoundError(f"Token {name} not found")
        return token

    def get_balance(self, name: str) -> int:
        """Balance of a token, or 0 for an unknown name."""
        token = self._tokens.get(name)
        if token is None:
            logger.debug("balance_unknown_token", token=name)
            return 0
        return token.balance

    def names(self) -> list[str]:
        return list(self._tokens)

    def __contains__(self, name: object) -> bool:
        return name in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(list(self._tokens.values()))

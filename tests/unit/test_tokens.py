"""Tests for Token and TokenRegistry."""

import pytest

from cpamm.constants import UINT64_MAX
from cpamm.errors import (
    AlreadyExistsError,
    AmountOverflowError,
    InsufficientBalanceError,
    InvalidArgumentError,
    NotFoundError,
)
from cpamm.tokens import Token, TokenRegistry
from tests.helpers import TOKEN_A, TOKEN_B


class TestToken:
    """Tests for balance updates on a single token."""

    def test_new_token_has_zero_balance(self):
        assert Token(TOKEN_A).balance == 0

    def test_credit_and_debit(self):
        token = Token(TOKEN_A)
        token.credit(100)
        token.debit(40)
        assert token.balance == 60

    def test_credit_overflow(self):
        token = Token(TOKEN_A, balance=UINT64_MAX)
        with pytest.raises(AmountOverflowError):
            token.credit(1)
        assert token.balance == UINT64_MAX

    def test_debit_below_zero(self):
        token = Token(TOKEN_A, balance=5)
        with pytest.raises(InsufficientBalanceError):
            token.debit(6)
        assert token.balance == 5

    def test_balance_after_does_not_mutate(self):
        token = Token(TOKEN_A, balance=10)
        assert token.balance_after_credit(5) == 15
        assert token.balance_after_debit(5) == 5
        assert token.balance == 10

    def test_identity_equality(self):
        """Tokens compare by identity so pools can tell shared tokens apart."""
        assert Token(TOKEN_A) != Token(TOKEN_A)


class TestTokenRegistry:
    """Tests for TokenRegistry."""

    def test_add_token(self):
        registry = TokenRegistry()
        token = registry.add_token(TOKEN_A)
        assert token.name == TOKEN_A
        assert token.balance == 0
        assert TOKEN_A in registry
        assert len(registry) == 1

    def test_duplicate_rejected(self):
        """A duplicate keeps the existing Token object and its balance."""
        registry = TokenRegistry()
        original = registry.add_token(TOKEN_A)
        original.credit(50)

        with pytest.raises(AlreadyExistsError):
            registry.add_token(TOKEN_A)

        assert registry.get(TOKEN_A) is original
        assert registry.get_balance(TOKEN_A) == 50

    @pytest.mark.parametrize("name", ["", None, 7])
    def test_invalid_name_rejected(self, name):
        with pytest.raises(InvalidArgumentError):
            TokenRegistry().add_token(name)  # type: ignore[arg-type]

    def test_unknown_balance_is_zero(self):
        assert TokenRegistry().get_balance("missing") == 0

    def test_get_and_require(self):
        registry = TokenRegistry()
        token = registry.add_token(TOKEN_A)
        assert registry.get(TOKEN_A) is token
        assert registry.get(TOKEN_B) is None
        assert registry.require(TOKEN_A) is token
        with pytest.raises(NotFoundError):
            registry.require(TOKEN_B)

    def test_names_keep_insertion_order(self):
        registry = TokenRegistry()
        registry.add_token(TOKEN_B)
        registry.add_token(TOKEN_A)
        assert registry.names() == [TOKEN_B, TOKEN_A]
        assert [token.name for token in registry] == [TOKEN_B, TOKEN_A]

"""AMM error classes.

Every failure the pool engine can report has an ErrorKind and a matching
exception class. The kind travels with the exception so callers that need a
plain result (see cpamm.entrypoint) can map it without isinstance chains.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failures reported by the pool engine."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    TOKEN_MISMATCH = "token_mismatch"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    ZERO_RESERVE = "zero_reserve"
    INVALID_ARGUMENT = "invalid_argument"
    AMOUNT_OVERFLOW = "amount_overflow"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    DEPOSIT_RATIO = "deposit_ratio"
    SLIPPAGE_EXCEEDED = "slippage_exceeded"
    WRITE_ACCESS_REQUIRED = "write_access_required"


class AMMError(Exception):
    """Base error for AMM operations."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(AMMError):
    """Unknown token name or pool key."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(AMMError):
    """Token or pool registered twice."""

    kind = ErrorKind.ALREADY_EXISTS


class TokenMismatchError(AMMError):
    """Swap names tokens that do not belong to the pool."""

    kind = ErrorKind.TOKEN_MISMATCH


class InsufficientLiquidityError(AMMError):
    """Swap would drain the output reserve to zero or below."""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY


class ZeroReserveError(AMMError):
    """Pool has a zero reserve and cannot price or swap."""

    kind = ErrorKind.ZERO_RESERVE


class InvalidArgumentError(AMMError):
    """Malformed argument (empty name, wrong type, same token twice)."""

    kind = ErrorKind.INVALID_ARGUMENT


class AmountOverflowError(AMMError):
    """Resulting balance or reserve would not fit in a u64."""

    kind = ErrorKind.AMOUNT_OVERFLOW


class InsufficientBalanceError(AMMError):
    """Token balance would go negative."""

    kind = ErrorKind.INSUFFICIENT_BALANCE


class DepositRatioError(AMMError):
    """Deposit ratio deviates from the pool ratio beyond the tolerance."""

    kind = ErrorKind.DEPOSIT_RATIO


class SlippageError(AMMError):
    """Swap output is below the caller's minimum."""

    kind = ErrorKind.SLIPPAGE_EXCEEDED


class WriteAccessError(AMMError):
    """Mutating call made without write access."""

    kind = ErrorKind.WRITE_ACCESS_REQUIRED

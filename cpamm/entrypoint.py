"""Call dispatch for external callers.

Contract-style callers arrive with an operation name, a positional argument
list of strings and unsigned 64-bit integers, and a flag telling whether the
caller may write. dispatch() checks the arguments against the operation's
signature, enforces the write flag and runs the call on a SwapFacade.

Domain failures never escape as exceptions here: they come back as a
CallResult carrying the ErrorKind, and the caller decides whether to surface
or suppress them. Results travel back as u64 values, so a value outside that
range (a fixed-point price of an extremely lopsided pool) is reported as
AMOUNT_OVERFLOW rather than truncated or saturated.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from cpamm.errors import (
    AMMError,
    AmountOverflowError,
    ErrorKind,
    InvalidArgumentError,
    WriteAccessError,
)
from cpamm.facade import SwapFacade
from cpamm.models.types import validate_token_name, validate_uint64
from cpamm.safe_int import S

logger = structlog.get_logger()

# Positional argument kinds
STR = "str"
U64 = "u64"


@dataclass(frozen=True)
class Operation:
    """Signature of a dispatchable operation."""

    name: str
    params: tuple[str, ...]
    mutating: bool
    call: Callable[..., Any]


@dataclass(frozen=True)
class CallResult:
    """Result of a dispatched call.

    Attributes:
        value: Primitive return value (balance, price, amount out) or None
            for operations that return nothing.
        error: If the call failed, the kind of failure.
        error_detail: Optional human-readable detail about the error.

    Examples:
        result = dispatch(facade, "getTokenBalance", ["A"], write_access=False)
        assert result.is_ok
        assert result.value == 0
    """

    value: int | None = None
    error: ErrorKind | None = None
    error_detail: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, value: int | None = None) -> CallResult:
        return cls(value=value)

    @classmethod
    def with_error(cls, error: ErrorKind, detail: str | None = None) -> CallResult:
        return cls(error=error, error_detail=detail)


def _add_token(facade: SwapFacade, name: str) -> None:
    facade.add_token(name)


def _add_liquidity_pool(
    facade: SwapFacade, token_a: str, token_b: str, reserve_a: int, reserve_b: int
) -> None:
    facade.add_liquidity_pool(token_a, token_b, reserve_a, reserve_b)


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("addToken", (STR,), True, _add_token),
        Operation("addLiquidityPool", (STR, STR, U64, U64), True, _add_liquidity_pool),
        Operation("getTokenBalance", (STR,), False, SwapFacade.get_token_balance),
        Operation("calculatePrice", (STR, STR), False, SwapFacade.calculate_price),
        Operation("addLiquidity", (STR, STR, U64, U64), True, SwapFacade.add_liquidity),
        Operation("swapTheToken", (STR, STR, STR, STR, U64), True, SwapFacade.swap_the_token),
    )
}


def _check_args(operation: Operation, args: Sequence[Any]) -> list[Any]:
    """Validate positional arguments against an operation's signature.

    Raises:
        InvalidArgumentError: On wrong arity or argument type
    """
    if len(args) != len(operation.params):
        raise InvalidArgumentError(
            f"{operation.name} takes {len(operation.params)} arguments, got {len(args)}"
        )
    checked = []
    for index, (kind, value) in enumerate(zip(operation.params, args, strict=True)):
        try:
            checked.append(validate_uint64(value) if kind == U64 else validate_token_name(value))
        except ValueError as err:
            raise InvalidArgumentError(f"{operation.name} argument {index}: {err}") from err
    return checked


def dispatch(
    facade: SwapFacade,
    operation: str,
    args: Sequence[Any],
    *,
    write_access: bool,
) -> CallResult:
    """Run one external call against the facade.

    Args:
        facade: Market to operate on
        operation: Operation name (addToken, addLiquidityPool, getTokenBalance,
            calculatePrice, addLiquidity, swapTheToken)
        args: Positional arguments in the operation's order
        write_access: Whether the caller may run mutating operations

    Returns:
        CallResult with the primitive value or the error kind
    """
    op = OPERATIONS.get(operation)
    if op is None:
        logger.warning("unknown_operation", operation=operation)
        return CallResult.with_error(ErrorKind.INVALID_ARGUMENT, f"Unknown operation {operation}")

    try:
        if op.mutating and not write_access:
            raise WriteAccessError(f"{operation} requires write access")
        value = op.call(facade, *_check_args(op, args))
        if value is not None and not S(value).is_uint64():
            raise AmountOverflowError(f"{operation} result {value} does not fit in a u64")
    except AMMError as err:
        logger.warning(
            "call_failed",
            operation=operation,
            error=err.kind.value,
            detail=str(err),
        )
        return CallResult.with_error(err.kind, str(err))

    logger.debug("call_succeeded", operation=operation, value=value)
    return CallResult.ok(value)

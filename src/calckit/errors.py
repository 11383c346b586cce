"""Exceptions raised while evaluating CalcKit expressions.

Every exception derives from :class:`CalcError` and from the closest
built-in exception, so callers may catch either the CalcKit type or the
familiar Python one (e.g. ``except ValueError``).

The calculus operators never wrap or reclassify errors raised by nested
evaluations; whatever the evaluator raises for a sample point reaches the
caller unchanged.
"""

from __future__ import annotations

__all__ = [
    "CalcError",
    "ExpectedDifferentialError",
    "UndefinedSymbolError",
    "ArityError",
    "UnitMismatchError",
    "CalcDomainError",
]


class CalcError(Exception):
    """Base class for all CalcKit evaluation errors."""


class ExpectedDifferentialError(CalcError, ValueError):
    """The integrand does not end in a multiplication by ``d<variable>``."""

    def __init__(self, message: str = "Expected a differential term, e.g. 'dx', at the end of the integrand."):
        super().__init__(message)


class UndefinedSymbolError(CalcError, NameError):
    """A variable or function name has no binding and is not a built-in."""

    def __init__(self, name: str):
        super().__init__(f"Undefined symbol: {name!r}.")
        self.name = name


class ArityError(CalcError, TypeError):
    """A function was called with the wrong number of arguments."""

    def __init__(self, name: str, expected: int, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(
            f"Function {name!r} expects {expected} argument(s); got {got}."
        )


class UnitMismatchError(CalcError, ValueError):
    """Two values with incompatible units were added or subtracted."""

    def __init__(self, left: str | None, right: str | None):
        self.left = left
        self.right = right
        super().__init__(f"Incompatible units: {left!r} and {right!r}.")


class CalcDomainError(CalcError, ArithmeticError):
    """An operation is undefined for its arguments (e.g. division by zero)."""

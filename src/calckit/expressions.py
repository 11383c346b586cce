"""Expression trees and statements for the CalcKit expression language.

CalcKit does not parse text. Expressions are built from the node classes
below, usually through the small builder helpers at the end of the module:

>>> from calckit.expressions import binary, literal, var, TokenKind
>>> expr = binary(literal(2.5), TokenKind.STAR, binary(var("x"), TokenKind.POWER, literal(3)))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from numbers import Number
from typing import Sequence, Union

from calckit.value import NumericValue, Undefined

__all__ = [
    "TokenKind",
    "Identifier",
    "Literal",
    "Var",
    "Unary",
    "Binary",
    "FnCall",
    "Integral",
    "Expr",
    "VarDecl",
    "FnDecl",
    "ExprStmt",
    "Stmt",
    "Declaration",
    "build_literal_node",
    "to_expr",
    "literal",
    "var",
    "unary",
    "binary",
    "fn_call",
    "integral",
]


class TokenKind(Enum):
    """Arithmetic operators understood by the evaluator."""

    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    POWER = "^"


@dataclass(frozen=True)
class Identifier:
    """A variable or function name, possibly followed by primes.

    ``f''`` is ``Identifier("f", 2)``: the second derivative of ``f``.
    """

    pure_name: str
    prime_count: int = 0

    def __post_init__(self):
        if self.prime_count < 0:
            raise ValueError("prime_count must be non-negative.")

    @property
    def full_name(self) -> str:
        return self.pure_name + "'" * self.prime_count

    @classmethod
    def from_full_name(cls, full_name: str) -> "Identifier":
        pure_name = full_name.rstrip("'")
        return cls(pure_name, len(full_name) - len(pure_name))

    @classmethod
    def from_name_and_primes(cls, pure_name: str, prime_count: int) -> "Identifier":
        return cls(pure_name, prime_count)

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class Literal:
    value: "NumericValue | Undefined"


@dataclass(frozen=True)
class Var:
    identifier: Identifier


@dataclass(frozen=True)
class Unary:
    op: TokenKind
    operand: "Expr"


@dataclass(frozen=True)
class Binary:
    left: "Expr"
    op: TokenKind
    right: "Expr"


@dataclass(frozen=True)
class FnCall:
    identifier: Identifier
    args: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class Integral:
    """``integral(a, b, integrand)``.

    With ``variable=None`` the integrand must end in ``* d<variable>``;
    otherwise ``variable`` names the integration variable directly.
    """

    a: "Expr"
    b: "Expr"
    integrand: "Expr"
    variable: str | None = None


Expr = Union[Literal, Var, Unary, Binary, FnCall, Integral]


@dataclass(frozen=True)
class VarDecl:
    identifier: Identifier
    expr: Expr


@dataclass(frozen=True)
class FnDecl:
    identifier: Identifier
    params: tuple
    body: Expr


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr


Declaration = Union[VarDecl, FnDecl]
Stmt = Union[VarDecl, FnDecl, ExprStmt]


def build_literal_node(value: NumericValue) -> Literal:
    """Lifts a computed value back into an expression node."""
    return Literal(value)


def to_expr(x: "Expr | NumericValue | Undefined | Number") -> Expr:
    """Returns ``x`` as an expression, wrapping numbers and values in literals."""
    if isinstance(x, (NumericValue, Undefined)):
        return Literal(x)
    if isinstance(x, Number):
        return Literal(NumericValue.from_number(x))
    return x


def literal(x: "NumericValue | Number", unit: str | None = None) -> Literal:
    if isinstance(x, NumericValue):
        return Literal(x if unit is None else x.with_unit(unit))
    return Literal(NumericValue.from_number(x, unit))


def var(full_name: str) -> Var:
    return Var(Identifier.from_full_name(full_name))


def unary(op: TokenKind, operand) -> Unary:
    return Unary(op, to_expr(operand))


def binary(left, op: TokenKind, right) -> Binary:
    return Binary(to_expr(left), op, to_expr(right))


def fn_call(full_name: str, args: Sequence = ()) -> FnCall:
    return FnCall(Identifier.from_full_name(full_name), tuple(to_expr(a) for a in args))


def integral(a, b, integrand, variable: str | None = None) -> Integral:
    return Integral(to_expr(a), to_expr(b), to_expr(integrand), variable)

"""Provides the CalcKit class.

A light wrapper around :class:`~calckit.evaluator.Context` that exposes a
simple API for defining functions and taking numerical derivatives and
integrals of them.

Typical usage examples:

>>> from calckit import CalcKit
>>> from calckit.expressions import TokenKind, binary, var
>>>
>>> kit = CalcKit()
>>> kit.define_function("f", ["x"], binary(var("x"), TokenKind.POWER, 3))
>>> slope = kit.derivative("f", 2.0)             # ~ 12
>>> curvature = kit.derivative("f", 2.0, order=2)  # ~ 12
>>> area = kit.integral(0, 2, binary(var("x"), TokenKind.STAR, var("dx")))  # 4
"""

from __future__ import annotations

from numbers import Number
from typing import Sequence

from calckit.calculus.config import CalculusConfig
from calckit.evaluator import Context
from calckit.expressions import (
    Expr,
    FnCall,
    FnDecl,
    Identifier,
    Integral,
    VarDecl,
    to_expr,
)
from calckit.symbol_table import SymbolTable
from calckit.value import NumericValue, Value


class CalcKit:
    """Provides access to numerical derivatives and integrals of expressions."""

    def __init__(
        self,
        config: CalculusConfig | None = None,
        symbol_table: SymbolTable | None = None,
    ):
        """Initialise with an optional configuration and symbol table.

        Args:
            config: Derivative step and quadrature subinterval count. Uses
                the defaults of :class:`CalculusConfig` if ``None``.
            symbol_table: Existing bindings to evaluate against. A new,
                empty table is created if ``None``.
        """
        self.context = Context(symbol_table=symbol_table, config=config)

    @property
    def symbol_table(self) -> SymbolTable:
        return self.context.symbol_table

    def define_variable(self, name: str, value: Expr | NumericValue | Number) -> None:
        """Binds ``name`` to ``value``, replacing any previous binding."""
        self.symbol_table.set(VarDecl(Identifier.from_full_name(name), to_expr(value)))

    def define_function(self, name: str, params: Sequence[str], body: Expr) -> None:
        """Binds ``name`` to a function of ``params`` with the given body."""
        self.symbol_table.set(FnDecl(Identifier.from_full_name(name), tuple(params), body))

    def evaluate(self, expr: Expr | NumericValue | Number) -> Value:
        """Returns the value of ``expr``."""
        return self.context.evaluate(to_expr(expr))

    def derivative(
        self,
        name: str,
        x: Expr | NumericValue | Number,
        order: int = 1,
    ) -> Value:
        """Returns the ``order``-th derivative of the function ``name`` at ``x``.

        The call goes through the evaluator as ``name`` followed by
        ``order`` primes, so each order is one central difference of the
        order below it.

        Raises:
            ValueError: If ``order`` is less than 1.
        """
        if order < 1:
            raise ValueError("order must be a positive integer.")
        identifier = Identifier.from_name_and_primes(name, order)
        return self.context.evaluate(FnCall(identifier, (to_expr(x),)))

    def integral(
        self,
        a: Expr | NumericValue | Number,
        b: Expr | NumericValue | Number,
        integrand: Expr,
        variable: str | None = None,
    ) -> Value:
        """Returns the integral of ``integrand`` from ``a`` to ``b``.

        Args:
            a: Lower bound.
            b: Upper bound.
            integrand: The expression to integrate. Without ``variable`` it
                must end in a multiplication by ``d<variable>``.
            variable: Name of the integration variable, if given explicitly.

        Raises:
            ExpectedDifferentialError: If ``variable`` is ``None`` and
                ``integrand`` has no trailing differential.
        """
        node = Integral(to_expr(a), to_expr(b), integrand, variable)
        return self.context.evaluate(node)

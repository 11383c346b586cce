"""Provides the evaluation Context for CalcKit expression trees.

A :class:`Context` owns a :class:`~calckit.symbol_table.SymbolTable` and
evaluates expressions against it. Derivative calls (``f'(x)``) and
integral nodes are handed to :mod:`calckit.calculus`, which calls back into
the same context for every sample point.

Examples:
    >>> from calckit.evaluator import Context
    >>> from calckit.expressions import FnDecl, Identifier, TokenKind, binary, fn_call, var
    >>> context = Context()
    >>> context.symbol_table.set(
    ...     FnDecl(Identifier("f"), ("x",), binary(var("x"), TokenKind.POWER, 2))
    ... )
    >>> round(context.evaluate(fn_call("f'", [3])).to_float(), 6)
    6.0
"""

from __future__ import annotations

import math
from contextlib import ExitStack
from typing import Callable, Iterable, Sequence

import numpy as np

from calckit.calculus.config import CalculusConfig
from calckit.calculus.derivative import derive_func
from calckit.calculus.integral import integrate, integrate_with_unknown_variable
from calckit.errors import ArityError, CalcDomainError, UndefinedSymbolError
from calckit.expressions import (
    Binary,
    Expr,
    ExprStmt,
    FnCall,
    FnDecl,
    Identifier,
    Integral,
    Literal,
    Stmt,
    TokenKind,
    Unary,
    Var,
    VarDecl,
    build_literal_node,
)
from calckit.symbol_table import SymbolTable
from calckit.value import NumericValue, Value

__all__ = ["Context", "BUILTIN_CONSTANTS", "BUILTIN_FUNCTIONS"]


#: Names that evaluate to a constant unless the symbol table binds them.
BUILTIN_CONSTANTS: dict[str, NumericValue] = {
    "e": NumericValue(math.e),
    "pi": NumericValue(math.pi),
    "tau": NumericValue(math.tau),
    "i": NumericValue(0.0, 1.0),
}

#: Single-argument functions evaluated with numpy; ``numpy.emath`` keeps
#: ``sqrt`` and the logarithms defined for negative reals.
BUILTIN_FUNCTIONS: dict[str, Callable] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "exp": np.exp,
    "ln": np.emath.log,
    "log": np.emath.log10,
    "sqrt": np.emath.sqrt,
    "abs": np.abs,
    "re": np.real,
    "im": np.imag,
}

# These keep the unit of their argument; all others return a plain number.
_UNIT_PRESERVING = frozenset({"abs", "re", "im"})

_BINARY_OPERATIONS: dict[TokenKind, Callable[[NumericValue, Value], Value]] = {
    TokenKind.PLUS: NumericValue.add,
    TokenKind.MINUS: NumericValue.sub,
    TokenKind.STAR: NumericValue.mul,
    TokenKind.SLASH: NumericValue.div,
    TokenKind.POWER: NumericValue.pow,
}


class Context:
    """Evaluates expressions against a symbol table.

    Attributes:
        symbol_table: Variable and function bindings. The calculus
            operators rebind names in it temporarily and always leave it as
            they found it, except for the ``d<variable>`` binding made by an
            integral with an inferred variable.
        config: Step size and subinterval count used by the calculus
            operators.
    """

    def __init__(
        self,
        symbol_table: SymbolTable | None = None,
        config: CalculusConfig | None = None,
    ) -> None:
        self.symbol_table = symbol_table if symbol_table is not None else SymbolTable()
        self.config = config if config is not None else CalculusConfig()

    def interpret(self, statements: Iterable[Stmt | Expr]) -> Value | None:
        """Runs ``statements`` in order.

        Declarations are added to the symbol table; expressions are
        evaluated.

        Returns:
            The value of the last expression, or ``None`` if there was none.
        """
        result = None
        for stmt in statements:
            if isinstance(stmt, (VarDecl, FnDecl)):
                self.symbol_table.set(stmt)
            elif isinstance(stmt, ExprStmt):
                result = self.evaluate(stmt.expr)
            else:
                result = self.evaluate(stmt)
        return result

    def evaluate(self, expr: Expr, unit: str | None = None) -> Value:
        """Evaluates ``expr``.

        Args:
            expr: The expression to evaluate.
            unit: Expected unit. Attached to the result if the result has
                no unit of its own.

        Returns:
            The value of ``expr``.

        Raises:
            CalcError: If a name is undefined, a function is called with
                the wrong number of arguments, units clash or an operation
                is undefined for its arguments.
        """
        return _expect_unit(self._eval(expr), unit)

    def call_function(
        self,
        identifier: Identifier,
        args: Sequence[Expr],
        unit: str | None = None,
    ) -> Value:
        """Calls the function named by ``identifier`` with unevaluated ``args``.

        An identifier with primes is a derivative and is differentiated
        numerically, one order per call. Otherwise the name is looked up in
        the symbol table and then among the built-in functions.

        Args:
            identifier: Function name, possibly with primes.
            args: Argument expressions, evaluated in the caller's bindings.
            unit: Expected unit of the result.

        Returns:
            The value of the call.
        """
        name = identifier.full_name

        if identifier.prime_count > 0:
            _check_arity(name, 1, args)
            argument = self.evaluate(args[0])
            return _expect_unit(derive_func(self, identifier, argument), unit)

        decl = self.symbol_table.get(name)
        if isinstance(decl, FnDecl):
            _check_arity(name, len(decl.params), args)
            values = [self.evaluate(arg) for arg in args]
            with ExitStack() as stack:
                for param, value in zip(decl.params, values):
                    stack.enter_context(self.symbol_table.shadowed(param))
                    self.symbol_table.set(
                        VarDecl(Identifier.from_full_name(param), build_literal_node(value))
                    )
                return self.evaluate(decl.body, unit)

        if decl is None and name in BUILTIN_FUNCTIONS:
            _check_arity(name, 1, args)
            return _expect_unit(self._call_builtin(name, self.evaluate(args[0])), unit)

        raise UndefinedSymbolError(name)

    def _eval(self, expr: Expr) -> Value:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Var):
            return self._eval_var(expr.identifier)
        if isinstance(expr, Binary):
            left = self._eval(expr.left)
            right = self._eval(expr.right)
            if left.is_undefined:
                return left
            return _BINARY_OPERATIONS[expr.op](left, right)
        if isinstance(expr, Unary):
            operand = self._eval(expr.operand)
            return operand.neg() if expr.op is TokenKind.MINUS else operand
        if isinstance(expr, FnCall):
            return self.call_function(expr.identifier, expr.args)
        if isinstance(expr, Integral):
            if expr.variable is not None:
                return integrate(self, expr.a, expr.b, expr.integrand, expr.variable)
            return integrate_with_unknown_variable(self, expr.a, expr.b, expr.integrand)
        raise TypeError(f"Cannot evaluate object of type {type(expr).__name__}.")

    def _eval_var(self, identifier: Identifier) -> Value:
        name = identifier.full_name
        decl = self.symbol_table.get(name)
        if isinstance(decl, VarDecl):
            return self._eval(decl.expr)
        if decl is None and name in BUILTIN_CONSTANTS:
            return BUILTIN_CONSTANTS[name]
        raise UndefinedSymbolError(name)

    @staticmethod
    def _call_builtin(name: str, argument: Value) -> Value:
        if argument.is_undefined:
            return argument
        x = argument.to_complex() if argument.has_imaginary() else argument.real
        try:
            with np.errstate(divide="raise", invalid="raise", over="raise"):
                result = BUILTIN_FUNCTIONS[name](x)
        except FloatingPointError as exc:
            raise CalcDomainError(f"{name} is undefined at {argument}.") from exc
        unit = argument.unit if name in _UNIT_PRESERVING else None
        return NumericValue.from_complex(complex(result), unit)


def _check_arity(name: str, expected: int, args: Sequence[Expr]) -> None:
    if len(args) != expected:
        raise ArityError(name, expected, len(args))


def _expect_unit(value: Value, unit: str | None) -> Value:
    if unit is None or value.is_undefined or value.unit is not None:
        return value
    return value.with_unit(unit)

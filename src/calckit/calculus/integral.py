"""Numerical definite integrals.

``integral(a, b, expr dx)`` is evaluated with the composite Simpson's 3/8
rule: the integration variable is rebound to each of ``N + 1`` equally
spaced sample points and the integrand is evaluated at each one. The
variable's previous binding, if any, is restored afterwards, also when an
evaluation fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from calckit.calculus.weights import SIMPSON_38_SCALE, simpson_38_weights
from calckit.errors import ExpectedDifferentialError
from calckit.expressions import (
    Binary,
    Expr,
    Identifier,
    TokenKind,
    Var,
    VarDecl,
    build_literal_node,
    literal,
)
from calckit.logger import calckit_logger
from calckit.value import NumericValue, Value, as_number_or_zero

if TYPE_CHECKING:
    from calckit.evaluator import Context

__all__ = [
    "integrate_with_unknown_variable",
    "integrate",
    "find_integration_variable",
]


def find_integration_variable(expr: Expr) -> str:
    """Returns the integration variable named by the trailing differential of ``expr``.

    Only the root of ``expr`` is inspected: it has to be a multiplication
    whose right operand is a variable starting with ``d``. ``x * dx`` gives
    ``"x"``; ``dx * x`` or ``(x * dx) + 1`` are rejected.

    Raises:
        ExpectedDifferentialError: If the root does not have that shape.
    """
    if isinstance(expr, Binary) and expr.op is TokenKind.STAR:
        right = expr.right
        if isinstance(right, Var) and right.identifier.full_name.startswith("d"):
            return right.identifier.full_name[1:]
    raise ExpectedDifferentialError()


def integrate_with_unknown_variable(
    context: Context,
    a: Expr,
    b: Expr,
    expr: Expr,
) -> Value:
    """Integrates ``expr`` from ``a`` to ``b``, taking the variable from ``expr`` itself.

    ``expr`` must have the form ``<integrand> * d<variable>``. The
    differential ``d<variable>`` is bound to ``1`` so that it leaves the
    integrand's value unchanged; that binding stays in the symbol table.

    Args:
        context: The active evaluation context.
        a: Lower bound.
        b: Upper bound.
        expr: Integrand, ending in a multiplication by the differential.

    Returns:
        The approximate value of the integral.

    Raises:
        ExpectedDifferentialError: If ``expr`` does not end in ``* d<variable>``.
        CalcError: Whatever evaluating the bounds or the integrand raises.
    """
    integration_variable = find_integration_variable(expr)
    calckit_logger.debug("Inferred integration variable %r.", integration_variable)

    context.symbol_table.set(
        VarDecl(Identifier.from_full_name(f"d{integration_variable}"), literal(1))
    )

    return integrate(context, a, b, expr, integration_variable).round_if_needed()


def integrate(
    context: Context,
    a: Expr,
    b: Expr,
    expr: Expr,
    integration_variable: str,
) -> Value:
    """Integrates ``expr`` over ``integration_variable`` from ``a`` to ``b``.

    Args:
        context: The active evaluation context.
        a: Lower bound, evaluated once.
        b: Upper bound, evaluated once. May be complex, in which case the
            integral is taken along the straight line from ``a`` to ``b``.
        expr: Integrand.
        integration_variable: Name to rebind at each sample point.

    Returns:
        The approximate value of the integral.
    """
    return _simpsons_rule(context, a, b, expr, integration_variable).round_if_needed()


def _simpsons_rule(
    context: Context,
    a_expr: Expr,
    b_expr: Expr,
    expr: Expr,
    integration_variable: str,
) -> Value:
    """Composite Simpson's 3/8 rule."""
    n = context.config.subintervals
    weights = simpson_38_weights(n)
    identifier = Identifier.from_full_name(integration_variable)
    result_real = 0.0
    result_imaginary = 0.0

    with context.symbol_table.shadowed(identifier.full_name):
        a = context.evaluate(a_expr)
        b = context.evaluate(b_expr)
        h = b.sub_without_unit(a).div_without_unit(n)

        calckit_logger.debug(
            "Integrating over %s from %s to %s with %d subintervals.",
            integration_variable, a, b, n,
        )

        for i, factor in enumerate(weights.tolist()):
            variable_value = a.add_without_unit(h.mul_without_unit(i))
            context.symbol_table.set(
                VarDecl(identifier, build_literal_node(variable_value))
            )

            # factor * f(x_i)
            mul_real, mul_imaginary, _ = as_number_or_zero(context.evaluate(expr))
            result_real += factor * mul_real
            result_imaginary += factor * mul_imaginary

    h_real, h_imaginary, h_unit = as_number_or_zero(h)
    result = NumericValue(result_real, result_imaginary).mul_without_unit(
        NumericValue(
            SIMPSON_38_SCALE * h_real,
            SIMPSON_38_SCALE * h_imaginary,
            h_unit,
        )
    )
    if not result.is_finite():
        calckit_logger.warning(
            "Integral over %s from %s to %s is not finite.", integration_variable, a, b
        )
    return result

"""Numerical derivatives of user-defined functions.

``f'(x)`` is evaluated with a fixed-step central difference that calls the
evaluator for ``f`` at ``x + H`` and ``x - H``. Higher orders are obtained
by re-entry: evaluating ``f''(x)`` calls ``f'`` at two points, each of which
comes back here one order lower.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from calckit.expressions import Identifier, build_literal_node
from calckit.logger import calckit_logger
from calckit.value import NumericValue

if TYPE_CHECKING:
    from calckit.evaluator import Context

__all__ = ["derive_func"]


def derive_func(
    context: Context,
    name: Identifier,
    argument: NumericValue,
) -> NumericValue:
    """Returns the derivative of the function named by ``name`` at ``argument``.

    Computes ``(f(x + H) - f(x - H)) / (2H)`` where ``f`` is ``name`` with one
    prime fewer and ``H`` is ``context.config.derivative_step``. The step is
    a real number even when ``argument`` is complex or carries a unit.

    Args:
        context: The active evaluation context.
        name: Identifier with at least one prime, e.g. ``f'``.
        argument: The point of evaluation.

    Returns:
        The derivative, carrying the unit of ``argument``.

    Raises:
        ValueError: If ``name`` has no primes.
        CalcError: Whatever the two function calls raise, unchanged.
    """
    if name.prime_count < 1:
        raise ValueError(f"{name.full_name!r} does not name a derivative.")

    step = context.config.derivative_step
    unit = argument.unit
    argument_with_h = build_literal_node(argument.add_without_unit(step))
    argument_without_h = build_literal_node(argument.sub_without_unit(step))
    new_identifier = Identifier.from_name_and_primes(name.pure_name, name.prime_count - 1)

    calckit_logger.debug(
        "Differentiating %s at %s with step %g.", new_identifier, argument, step
    )

    f_x_h = context.call_function(new_identifier, [argument_with_h], unit)
    f_x = context.call_function(new_identifier, [argument_without_h], unit)

    result = (
        f_x_h.sub_without_unit(f_x)
        .div_without_unit(2.0 * step)
        .round_if_needed()
    )
    if result.is_undefined:
        return result
    result = result.with_unit(unit)
    if not result.is_finite():
        calckit_logger.warning(
            "Derivative %s at %s is not finite.", name.full_name, argument
        )
    return result

"""Configuration for the numerical calculus operators.

This config controls the fixed step size of the central-difference
derivative and the number of subintervals of the composite Simpson's 3/8
quadrature. The defaults are the values the worked examples are computed
with; changing them changes results.
"""

from __future__ import annotations

import math

__all__ = [
    "DEFAULT_DERIVATIVE_STEP",
    "DEFAULT_SUBINTERVALS",
    "CalculusConfig",
]

#: Perturbation ``H`` of the central difference ``(f(x+H) - f(x-H)) / 2H``.
DEFAULT_DERIVATIVE_STEP = 1e-6
#: Number of subintervals ``N`` of the Simpson's 3/8 rule.
DEFAULT_SUBINTERVALS = 900


class CalculusConfig:
    """Configuration for the derivative and integral operators."""

    def __init__(
        self,
        derivative_step: float = DEFAULT_DERIVATIVE_STEP,
        subintervals: int = DEFAULT_SUBINTERVALS,
    ):
        """Initialize configuration.

        Args:
            derivative_step:
                Real, dimensionless perturbation added to and subtracted
                from the argument of a derivative. The same step is used
                for complex and unit-bearing arguments. Must be finite and
                positive.

            subintervals:
                Number of subintervals ``N`` of the quadrature. The 3/8
                weight pattern only closes when ``N`` is a multiple of 3,
                so ``N`` must be a positive multiple of 3. The integrand is
                evaluated ``N + 1`` times per integral.

        Raises:
            ValueError: If either value is out of range.
        """
        derivative_step = float(derivative_step)
        if not math.isfinite(derivative_step) or derivative_step <= 0:
            raise ValueError("derivative_step must be finite and positive.")
        if isinstance(subintervals, float) and not math.isfinite(subintervals):
            raise ValueError("subintervals must be finite.")
        if isinstance(subintervals, bool) or int(subintervals) != subintervals:
            raise ValueError("subintervals must be an integer.")
        subintervals = int(subintervals)
        if subintervals <= 0 or subintervals % 3 != 0:
            raise ValueError(
                f"subintervals must be a positive multiple of 3; got {subintervals}."
            )

        self.derivative_step = derivative_step
        self.subintervals = subintervals

    def __repr__(self) -> str:
        return (
            f"CalculusConfig(derivative_step={self.derivative_step!r}, "
            f"subintervals={self.subintervals!r})"
        )

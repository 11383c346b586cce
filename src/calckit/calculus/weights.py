"""Weight tables for the composite Simpson's 3/8 rule."""

from functools import lru_cache

import numpy as np
from numpy.typing import NDArray

__all__ = [
    "simpson_38_weights",
    "SIMPSON_38_SCALE",
]

#: The composite 3/8 rule is ``3h/8 * sum(w_i * f(x_i))``.
SIMPSON_38_SCALE = 3.0 / 8.0


@lru_cache(maxsize=8)
def simpson_38_weights(
    num_subintervals: int,
) -> NDArray[np.float64]:
    """Creates the weights of the composite Simpson's 3/8 rule.

    The weights follow the repeating pattern ``1, 3, 3, 2, 3, 3, 2, ..., 3, 3, 1``:
    ``1`` at both end points, ``2`` at interior multiples of 3 and ``3``
    everywhere else.

    Args:
        num_subintervals: Number of subintervals ``N``. Must be a positive
            multiple of 3.

    Returns:
        A read-only array of length ``N + 1``.

    Raises:
        ValueError: If ``num_subintervals`` is not a positive multiple of 3.

    Examples:
        >>> simpson_38_weights(6)
        array([1., 3., 3., 2., 3., 3., 1.])
    """
    if num_subintervals <= 0 or num_subintervals % 3 != 0:
        raise ValueError("num_subintervals must be a positive multiple of 3")

    weights = np.full(num_subintervals + 1, 3.0, dtype=np.float64)
    weights[::3] = 2.0
    weights[0] = weights[-1] = 1.0
    weights.setflags(write=False)
    return weights

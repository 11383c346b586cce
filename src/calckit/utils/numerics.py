"""Numerical utilities."""

from __future__ import annotations

import math

__all__ = [
    "ROUNDING_TOLERANCE",
    "snap_to_integer",
]

#: Absolute distance to the nearest integer below which a value is snapped.
ROUNDING_TOLERANCE = 1e-10


def snap_to_integer(x: float, tolerance: float = ROUNDING_TOLERANCE) -> float:
    """Snaps ``x`` to the nearest integer if it is within floating-point noise of it.

    The comparison is absolute, i.e. ``|x - round(x)| < tolerance``, so the
    fractional digits of large values are kept. Non-finite values are
    returned unchanged.

    Args:
        x: Value to clean up.
        tolerance: Absolute snapping tolerance.

    Returns:
        ``float(round(x))`` when ``x`` is close enough to it, otherwise ``x``.

    Examples:
        >>> snap_to_integer(6.0000000000001)
        6.0
        >>> snap_to_integer(1143.10379)
        1143.10379
    """
    if not math.isfinite(x):
        return x
    nearest = float(round(x))
    if abs(x - nearest) < tolerance:
        # avoid returning -0.0
        return nearest + 0.0
    return x

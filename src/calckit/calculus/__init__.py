"""Numerical calculus operators.

Provides the central-difference derivative and the Simpson's 3/8 definite
integral used by the evaluator.
"""

from .config import CalculusConfig
from .derivative import derive_func
from .integral import integrate, integrate_with_unknown_variable

__all__ = [
    "CalculusConfig",
    "derive_func",
    "integrate",
    "integrate_with_unknown_variable",
]

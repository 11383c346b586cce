"""Numeric values produced by the CalcKit evaluator.

A value is either :data:`UNDEFINED` or a :class:`NumericValue`: a complex
number stored as separate real and imaginary floats, with an optional
physical unit label.

Two families of arithmetic are provided:

* unit-aware operators (``add``, ``sub``, ``mul``, ``div``, ``pow``) used by
  the evaluator for ordinary expressions;
* unit-ignoring operators (``*_without_unit``) used by the calculus
  operators, which perturb and sample values and decide themselves where a
  unit is reattached.

Examples:
    >>> from calckit.value import NumericValue
    >>> z = NumericValue(2.0, 3.0)
    >>> z.mul_without_unit(NumericValue(0.0, 1.0))
    NumericValue(real=-3.0, imaginary=2.0, unit=None)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Number
from typing import Union

from calckit.errors import CalcDomainError, UnitMismatchError
from calckit.utils.numerics import snap_to_integer

__all__ = [
    "NumericValue",
    "Undefined",
    "UNDEFINED",
    "Value",
    "as_number_or_zero",
]


class Undefined:
    """The result of an operation with no numeric meaning.

    Arithmetic involving an undefined value is itself undefined.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    is_undefined = True
    unit = None

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __str__(self) -> str:
        return "undefined"

    def _absorb(self, *_args, **_kwargs) -> "Undefined":
        return self

    add = sub = mul = div = pow = _absorb
    add_without_unit = sub_without_unit = _absorb
    mul_without_unit = div_without_unit = _absorb

    def neg(self) -> "Undefined":
        return self

    def round_if_needed(self) -> "Undefined":
        return self


#: The single undefined value.
UNDEFINED = Undefined()


@dataclass(frozen=True)
class NumericValue:
    """A complex number with an optional unit.

    Attributes:
        real: Real part.
        imaginary: Imaginary part.
        unit: Unit label such as ``"m"`` or ``"s"``, or ``None``.
    """

    real: float
    imaginary: float = 0.0
    unit: str | None = None

    is_undefined = False

    @classmethod
    def from_number(cls, x: Number, unit: str | None = None) -> "NumericValue":
        """Builds a value from a Python ``int``, ``float`` or ``complex``."""
        if isinstance(x, complex):
            return cls(float(x.real), float(x.imag), unit)
        return cls(float(x), 0.0, unit)

    @classmethod
    def from_complex(cls, z: complex, unit: str | None = None) -> "NumericValue":
        """Builds a value from a (possibly numpy) complex scalar."""
        z = complex(z)
        return cls(z.real, z.imag, unit)

    def to_complex(self) -> complex:
        return complex(self.real, self.imaginary)

    def to_float(self) -> float:
        return self.real

    def imaginary_to_float(self) -> float:
        return self.imaginary

    def has_imaginary(self) -> bool:
        return self.imaginary != 0.0

    def is_finite(self) -> bool:
        return math.isfinite(self.real) and math.isfinite(self.imaginary)

    def with_unit(self, unit: str | None) -> "NumericValue":
        return NumericValue(self.real, self.imaginary, unit)

    def round_if_needed(self) -> "NumericValue":
        """Snaps both components to nearby integers to remove floating-point noise."""
        return NumericValue(
            snap_to_integer(self.real),
            snap_to_integer(self.imaginary),
            self.unit,
        )

    # unit-ignoring arithmetic

    def add_without_unit(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        if other.is_undefined:
            return UNDEFINED
        return NumericValue.from_complex(
            self.to_complex() + other.to_complex(), _carried_unit(self, other)
        )

    def sub_without_unit(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        if other.is_undefined:
            return UNDEFINED
        return NumericValue.from_complex(
            self.to_complex() - other.to_complex(), _carried_unit(self, other)
        )

    def mul_without_unit(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        if other.is_undefined:
            return UNDEFINED
        return NumericValue.from_complex(
            self.to_complex() * other.to_complex(), _carried_unit(self, other)
        )

    def div_without_unit(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        if other.is_undefined:
            return UNDEFINED
        divisor = other.to_complex()
        if divisor == 0:
            raise CalcDomainError("Division by zero.")
        return NumericValue.from_complex(
            self.to_complex() / divisor, _carried_unit(self, other)
        )

    # unit-aware arithmetic

    def add(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        unit = _additive_unit(self, other)
        result = self.add_without_unit(other)
        return result if result.is_undefined else result.with_unit(unit)

    def sub(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        unit = _additive_unit(self, other)
        result = self.sub_without_unit(other)
        return result if result.is_undefined else result.with_unit(unit)

    def mul(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        result = self.mul_without_unit(other)
        if result.is_undefined:
            return result
        return result.with_unit(_join_units(self.unit, other.unit, "*"))

    def div(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        result = self.div_without_unit(other)
        if result.is_undefined:
            return result
        if self.unit is not None and self.unit == other.unit:
            return result.with_unit(None)
        return result.with_unit(_join_units(self.unit, other.unit, "/"))

    def pow(self, other: "Value | Number") -> "Value":
        other = _coerce(other)
        if other.is_undefined:
            return UNDEFINED
        if other.unit is not None:
            raise UnitMismatchError(None, other.unit)
        result = NumericValue.from_complex(
            _power(self.to_complex(), other.to_complex())
        )
        if self.unit is None or (other.real == 1.0 and not other.has_imaginary()):
            return result.with_unit(self.unit)
        return result.with_unit(f"{self.unit}^{_format_component(other.real)}")

    def neg(self) -> "NumericValue":
        return NumericValue(-self.real, -self.imaginary, self.unit)

    def __str__(self) -> str:
        if self.imaginary == 0.0:
            text = _format_component(self.real)
        elif self.real == 0.0:
            text = f"{_format_component(self.imaginary)}i"
        else:
            sign = "-" if self.imaginary < 0 else "+"
            text = (
                f"{_format_component(self.real)} {sign} "
                f"{_format_component(abs(self.imaginary))}i"
            )
        return text if self.unit is None else f"{text} {self.unit}"


Value = Union[NumericValue, Undefined]


def as_number_or_zero(value: Value) -> tuple[float, float, str | None]:
    """Returns ``(real, imaginary, unit)``, or zeros for an undefined value."""
    if value.is_undefined:
        return 0.0, 0.0, None
    return value.real, value.imaginary, value.unit


def _coerce(other: "Value | Number") -> Value:
    if isinstance(other, (NumericValue, Undefined)):
        return other
    if isinstance(other, Number):
        return NumericValue.from_number(other)
    raise TypeError(f"Cannot use {type(other).__name__} as a numeric value.")


def _carried_unit(left: NumericValue, right: NumericValue) -> str | None:
    return left.unit if left.unit is not None else right.unit


def _additive_unit(left: NumericValue, right: Value) -> str | None:
    if right.is_undefined:
        return left.unit
    if left.unit is not None and right.unit is not None and left.unit != right.unit:
        raise UnitMismatchError(left.unit, right.unit)
    return _carried_unit(left, right)


def _join_units(left: str | None, right: str | None, op: str) -> str | None:
    if left is None and right is None:
        return None
    if right is None:
        return left
    if left is None:
        return right if op == "*" else f"1/{right}"
    return f"{left}{op}{right}"


def _power(base: complex, exponent: complex) -> complex:
    """Raises ``base`` to ``exponent``, staying real where the result is real."""
    try:
        if base.imag == 0.0 and exponent.imag == 0.0:
            b, e = base.real, exponent.real
            if b == 0.0 and e < 0.0:
                raise CalcDomainError("Zero cannot be raised to a negative power.")
            if b >= 0.0 or e.is_integer():
                return complex(b ** e)
        if base == 0:
            if exponent.real > 0.0:
                return 0j
            raise CalcDomainError("Zero cannot be raised to a non-positive complex power.")
        return base ** exponent
    except OverflowError as exc:
        raise CalcDomainError("Numerical result out of range.") from exc


def _format_component(x: float) -> str:
    if math.isfinite(x) and x.is_integer() and abs(x) < 1e16:
        return str(int(x))
    return format(x, ".10g")

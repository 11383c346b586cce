"""Provides numerical derivatives and integrals for CalcKit expressions."""

from importlib.metadata import PackageNotFoundError, version

from calckit.calc_kit import CalcKit
from calckit.calculus.config import CalculusConfig
from calckit.errors import (
    ArityError,
    CalcDomainError,
    CalcError,
    ExpectedDifferentialError,
    UndefinedSymbolError,
    UnitMismatchError,
)
from calckit.evaluator import Context
from calckit.symbol_table import SymbolTable
from calckit.value import UNDEFINED, NumericValue

try:
    __version__ = version("calckit")
except PackageNotFoundError:
    pass

CalcKit.__module__ = "calckit"

__all__ = [
    "CalcKit",
    "CalculusConfig",
    "Context",
    "SymbolTable",
    "NumericValue",
    "UNDEFINED",
    "CalcError",
    "ExpectedDifferentialError",
    "UndefinedSymbolError",
    "ArityError",
    "UnitMismatchError",
    "CalcDomainError",
]

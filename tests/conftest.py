"""Pytest configuration file with fixtures shared by the CalcKit tests."""

import pytest

from calckit.evaluator import Context
from calckit.expressions import FnDecl, Identifier, TokenKind, binary, var
from calckit.symbol_table import SymbolTable

__all__ = ["cubic_decl"]


@pytest.fixture
def symbol_table():
    """Returns an empty symbol table."""
    return SymbolTable()


@pytest.fixture
def context(symbol_table):
    """Returns a context with default configuration over ``symbol_table``."""
    return Context(symbol_table)


def cubic_decl(name: str = "f", coefficient: float = 2.5) -> FnDecl:
    """Returns the declaration ``name(x) = coefficient * x^3``."""
    return FnDecl(
        Identifier.from_full_name(name),
        ("x",),
        binary(coefficient, TokenKind.STAR, binary(var("x"), TokenKind.POWER, 3)),
    )


@pytest.fixture
def cubic(context):
    """Declares ``f(x) = 2.5 x^3`` in ``context`` and returns the context."""
    context.symbol_table.set(cubic_decl())
    return context

"""Unit tests for the Simpson's 3/8 definite integral."""

import logging

import pytest

from calckit.calculus.config import CalculusConfig
from calckit.calculus.integral import (
    find_integration_variable,
    integrate,
    integrate_with_unknown_variable,
)
from calckit.errors import CalcDomainError, ExpectedDifferentialError, UndefinedSymbolError
from calckit.evaluator import Context
from calckit.expressions import (
    FnDecl,
    Identifier,
    TokenKind,
    VarDecl,
    binary,
    fn_call,
    integral,
    literal,
    var,
)
from calckit.value import NumericValue

STAR = TokenKind.STAR
PLUS = TokenKind.PLUS
POWER = TokenKind.POWER


def test_integral_with_inferred_variable(context):
    """integral(2, 4, x dx) is 6."""
    result = integrate_with_unknown_variable(
        context, literal(2), literal(4), binary(var("x"), STAR, var("dx"))
    )
    assert result.to_float() == 6.0
    assert result.imaginary_to_float() == 0.0


def test_integral_with_explicit_variable(context):
    """integrate(2, 4, x, "x") is 6."""
    result = integrate(context, literal(2), literal(4), var("x"), "x")
    assert result.to_float() == 6.0


def test_integral_to_complex_bound(context):
    """The integral of x i from 2 to 3 + 4i is -12 - 5.5i."""
    result = integrate(
        context,
        literal(2),
        literal(NumericValue(3.0, 4.0)),
        binary(var("x"), STAR, var("i")),
        "x",
    )
    assert result.to_float() == pytest.approx(-12.0)
    assert result.imaginary_to_float() == pytest.approx(-5.5)


def test_integral_of_cubic_is_exact(context):
    """The 3/8 rule integrates cubics exactly."""
    result = integrate(
        context, literal(0), literal(2), binary(var("t"), POWER, 3), "t"
    )
    assert result.to_float() == 4.0


def test_integral_of_sine(context):
    """The integral of sin from 0 to pi is 2."""
    result = integrate(context, literal(0), var("pi"), fn_call("sin", [var("x")]), "x")
    assert result.to_float() == pytest.approx(2.0, rel=1e-10)


def test_integral_with_reversed_bounds(context):
    """Swapping the bounds flips the sign."""
    result = integrate(context, literal(4), literal(2), var("x"), "x")
    assert result.to_float() == -6.0


@pytest.mark.parametrize(
    "integrand",
    [
        var("x"),
        binary(var("dx"), STAR, var("x")),
        binary(var("x"), PLUS, var("dx")),
        binary(binary(var("x"), STAR, var("dx")), PLUS, 1),
        binary(var("x"), STAR, literal(2)),
        binary(var("x"), STAR, var("y")),
    ],
)
def test_missing_differential_raises(context, integrand):
    """Only a root-level multiplication by d<variable> is accepted."""
    before = context.symbol_table.snapshot()
    with pytest.raises(ExpectedDifferentialError):
        integrate_with_unknown_variable(context, literal(0), literal(1), integrand)
    assert context.symbol_table.snapshot() == before


def test_find_integration_variable_strips_leading_d():
    """The variable is the differential's name without the d."""
    assert find_integration_variable(binary(var("t"), STAR, var("dt"))) == "t"
    assert find_integration_variable(binary(1, STAR, var("dtheta"))) == "theta"


def test_differential_stays_bound_to_one(context):
    """The inferred d<variable> binding is kept after the integral."""
    integrate_with_unknown_variable(
        context, literal(0), literal(1), binary(var("x"), STAR, var("dx"))
    )
    assert context.evaluate(var("dx")).to_float() == 1.0
    assert "x" not in context.symbol_table


def test_existing_binding_is_restored(context):
    """A variable bound before the integral has its old value afterwards."""
    decl = VarDecl(Identifier("x"), literal(7.0))
    context.symbol_table.set(decl)
    result = integrate(context, literal(0), literal(3), var("x"), "x")
    assert result.to_float() == pytest.approx(4.5)
    assert context.symbol_table.get("x") is decl


def test_failing_integrand_restores_binding(context):
    """An evaluation error mid-way still restores the integration variable."""
    decl = VarDecl(Identifier("x"), literal(7.0))
    context.symbol_table.set(decl)
    before = context.symbol_table.snapshot()

    with pytest.raises(UndefinedSymbolError):
        integrate(context, literal(0), literal(1), binary(var("x"), STAR, var("y")), "x")

    assert context.symbol_table.snapshot() == before


def test_failing_bound_removes_integration_variable(context):
    """A failing bound leaves no binding for a previously unbound variable."""
    with pytest.raises(CalcDomainError):
        integrate(context, binary(1, TokenKind.SLASH, 0), literal(1), var("x"), "x")
    assert len(context.symbol_table) == 0


def test_bounds_are_evaluated_once(context, monkeypatch):
    """Each bound is evaluated once; the integrand N + 1 times."""
    config = CalculusConfig(subintervals=9)
    context = Context(context.symbol_table, config)
    lower, upper, integrand = literal(0), literal(1), var("x")
    counts = {"lower": 0, "upper": 0, "integrand": 0}
    original = Context.evaluate

    def spy(self, expr, unit=None):
        if expr is lower:
            counts["lower"] += 1
        elif expr is upper:
            counts["upper"] += 1
        elif expr is integrand:
            counts["integrand"] += 1
        return original(self, expr, unit)

    monkeypatch.setattr(Context, "evaluate", spy)
    integrate(context, lower, upper, integrand, "x")
    assert counts == {"lower": 1, "upper": 1, "integrand": 10}


def test_subintervals_come_from_config(symbol_table):
    """A coarse grid is still exact for a quadratic."""
    context = Context(symbol_table, CalculusConfig(subintervals=3))
    result = integrate(context, literal(0), literal(3), binary(var("x"), POWER, 2), "x")
    assert result.to_float() == 9.0


def test_step_unit_is_carried_to_result(context):
    """A unit on the bounds ends up on the result."""
    result = integrate(context, literal(0, "s"), literal(2, "s"), literal(3), "t")
    assert result.to_float() == 6.0
    assert result.unit == "s"


def test_integral_node_in_evaluator(context):
    """Integral nodes route to the inferred or explicit variable form."""
    inferred = context.evaluate(integral(2, 4, binary(var("x"), STAR, var("dx"))))
    explicit = context.evaluate(integral(2, 4, var("u"), variable="u"))
    assert inferred.to_float() == explicit.to_float() == 6.0


def test_derivative_inside_integral_on_same_variable(context):
    """f'(x) inside an integral over x sees the outer sample, not its own."""
    context.symbol_table.set(
        FnDecl(Identifier("f"), ("x",), binary(var("x"), POWER, 2))
    )
    before = context.symbol_table.snapshot()
    result = integrate(context, literal(0), literal(1), fn_call("f'", [var("x")]), "x")
    assert result.to_float() == pytest.approx(1.0, abs=1e-8)
    assert context.symbol_table.snapshot() == before


def test_nested_integrals_on_same_variable(symbol_table):
    """An inner integral over x restores the outer sample of x."""
    context = Context(symbol_table, CalculusConfig(subintervals=6))
    # integral(0, 1, x + integral(0, 1, x, x), x) = 1/2 + 1/2
    inner = integral(0, 1, var("x"), variable="x")
    result = integrate(context, literal(0), literal(1), binary(var("x"), PLUS, inner), "x")
    assert result.to_float() == 1.0
    assert len(symbol_table) == 0


def test_mixed_sequence_keeps_bindings(cubic):
    """Succeeding and failing calculus calls together leave bindings unchanged."""
    cubic.symbol_table.set(VarDecl(Identifier("x"), literal(5.0)))
    before = cubic.symbol_table.snapshot()

    cubic.evaluate(fn_call("f'", [var("x")]))
    integrate(cubic, literal(0), literal(1), fn_call("f''", [var("x")]), "x")
    with pytest.raises(UndefinedSymbolError):
        integrate(cubic, literal(0), literal(1), fn_call("g'", [var("x")]), "x")
    with pytest.raises(ExpectedDifferentialError):
        integrate_with_unknown_variable(cubic, literal(0), literal(1), var("x"))

    assert cubic.symbol_table.snapshot() == before


@pytest.mark.parametrize("constant", [2_000_000.0015, 1_000_000_000.5])
def test_large_constant_keeps_its_fraction(context, constant):
    """Rounding cleans noise but keeps the fractional digits of large results."""
    result = integrate(context, literal(0), literal(1), literal(constant), "x")
    assert result.to_float() == pytest.approx(constant, rel=0, abs=1e-5)
    assert result.to_float() != round(constant)


def test_non_finite_integral_logs_warning(context, caplog):
    """An overflowing integrand gives a non-finite result and a warning."""
    integrand = binary(literal(1e308), STAR, 10)
    with caplog.at_level(logging.WARNING, logger="calckit"):
        result = integrate(context, literal(0), literal(1), integrand, "x")
    assert not result.is_finite()
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any("is not finite" in r.getMessage() for r in warnings)

"""Tests for evaluation entry points, calculator actions and symbolic export."""

from __future__ import annotations

import logging
import math

import pytest
import sympy as sp

from calcgraph import (
    compile_expression,
    entropy_action,
    equals_action,
    evaluate,
    evaluate_strict,
    format_result,
)
from calcgraph.errors import (
    EvaluationError,
    ExpressionTooLong,
    InvalidToken,
    UnbalancedParens,
)


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("2+3*4", 14.0),
        ("(2+3)*4", 20.0),
        ("2(3+4)", 14.0),
        ("(1)(2)", 2.0),
        ("2 3", 6.0),
        ("2^3^2", 64.0),
        ("-2^2", 4.0),
        ("2^-1", 0.5),
        ("10-4-3", 3.0),
        ("8/2/2", 2.0),
        ("sin(0)", 0.0),
        ("sqrt(16)+1", 5.0),
        ("1/inf", 0.0),
    ],
)
def test_arithmetic(expression: str, expected: float) -> None:
    assert evaluate(expression) == expected


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("pi", math.pi),
        ("2pi", 2 * math.pi),
        ("tau/2", math.pi),
        ("e", math.e),
        ("2e", 2 * math.e),
        ("ee", math.e**2),
        ("exp(1)", math.e),
        ("2exp(0)", 2.0),
        ("log(1000)", 3.0),
        ("ln(e)", 1.0),
        ("sin(cos(0))", math.sin(1.0)),
        ("atan(1)*4", math.pi),
    ],
)
def test_constants_and_functions(expression: str, expected: float) -> None:
    assert evaluate(expression) == pytest.approx(expected)


def test_variable_binding() -> None:
    assert evaluate("x^2", 3.0) == 9.0
    assert evaluate("x^2", -2.0) == 4.0
    assert evaluate("2x+1", 0.5) == 2.0
    assert evaluate("sin(x", math.pi / 2) == pytest.approx(1.0)


def test_entropy() -> None:
    assert evaluate("entropy(0.5)") == pytest.approx(1.0)
    assert evaluate("entropy(0)") == 0.0
    assert evaluate("entropy(1)") == 0.0
    assert evaluate("entropy(x)", 0.5) == pytest.approx(1.0)


def test_undefined_results_are_nan_or_inf() -> None:
    assert math.isnan(evaluate("sqrt(-1)"))
    assert math.isnan(evaluate("1/0"))
    assert math.isnan(evaluate("0/0"))
    assert math.isnan(evaluate("(-8)^(1/3)"))
    assert evaluate("10^400") == math.inf
    assert evaluate("-inf") == -math.inf


@pytest.mark.parametrize("expression", ["", "1+", "2)", "foo", "sin 2", "1.2.3+", "2 $ 3"])
def test_invalid_expressions_evaluate_to_nan(expression: str) -> None:
    assert math.isnan(evaluate(expression))


def test_excess_open_parens_auto_close() -> None:
    assert evaluate("((2") == 2.0
    assert evaluate("2*(3+4") == 14.0


def test_evaluate_is_independent_of_x_without_variable() -> None:
    assert evaluate("2+3*sin(1)", 1.0) == evaluate("2+3*sin(1)", -99.0)


def test_evaluate_strict_raises_specific_errors() -> None:
    with pytest.raises(UnbalancedParens) as excinfo:
        evaluate_strict("2)")
    assert excinfo.value.position == 1
    assert excinfo.value.expression == "2)"

    with pytest.raises(InvalidToken):
        evaluate_strict("2*")
    with pytest.raises(ExpressionTooLong):
        evaluate_strict("1+" * 200 + "1")
    assert math.isnan(evaluate("1+" * 200 + "1"))


def test_errors_are_value_errors() -> None:
    assert issubclass(EvaluationError, ValueError)
    with pytest.raises(ValueError):
        evaluate_strict("*")


def test_invalid_expression_is_logged_at_debug(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="calcgraph.evaluator"):
        evaluate("2)")
    assert "is invalid" in caplog.text


def test_compiled_expression_reuse() -> None:
    f = compile_expression("x^2 + 1")
    assert f(3.0) == 10.0
    assert f(0.0) == 1.0
    assert f.uses_variable
    assert not compile_expression("sin(pi)").uses_variable
    assert compile_expression("sqrt(-x)").uses_variable
    assert f.substitute(2.0) == "2^2+1"
    assert repr(f) == "CompiledExpression('x^2 + 1')"


def test_to_sympy_follows_evaluator_precedence() -> None:
    x = sp.Symbol("x")
    assert compile_expression("x^2").to_sympy(x) == x**2
    assert compile_expression("2x+1").to_sympy(x) == 2 * x + 1
    assert compile_expression("sin(x)+pi").to_sympy(x) == sp.sin(x) + sp.pi
    assert compile_expression("2^3^2").to_sympy(x) == 64
    assert compile_expression("ln(x)").to_sympy(x) == sp.log(x)


def test_to_sympy_entropy_matches_numeric() -> None:
    p = sp.Symbol("p")
    expr = compile_expression("entropy(x)").to_sympy(p)
    assert float(expr.subs(p, sp.Rational(1, 4))) == pytest.approx(evaluate("entropy(0.25)"))
    assert expr.subs(p, 2) == 0


def test_format_result() -> None:
    assert format_result(14.0) == "14"
    assert format_result(1.0 / 3.0) == "0.333333"
    assert format_result(math.nan) == "Error"
    assert format_result(math.inf) == "inf"


def test_equals_action() -> None:
    assert equals_action("2+3*4") == "14"
    assert equals_action("1/0") == "Error"
    assert equals_action("2)") == "Error"
    assert equals_action("x+1") == "1"


def test_entropy_action() -> None:
    assert entropy_action("0.5") == "1"
    assert entropy_action("1/4") == "%.6g" % evaluate("entropy(0.25)")
    assert entropy_action("2") == "Error: 0 < p < 1"
    assert entropy_action("0") == "Error: 0 < p < 1"
    assert entropy_action("oops") == "Error: 0 < p < 1"


def test_letter_runs_back_off_to_shorter_names() -> None:
    assert evaluate("expi", 1.0) == pytest.approx(math.e * math.pi)
    assert evaluate("exp(1)") == pytest.approx(math.e)


def test_deep_nesting_is_nan() -> None:
    assert evaluate("(" * 20 + "x", 3.0) == 3.0
    assert math.isnan(evaluate("(" * 200 + "1"))
    with pytest.raises(InvalidToken):
        evaluate_strict("(" * 200 + "1")

"""Tests for the function and constant registry and binary entropy."""

from __future__ import annotations

import math
import warnings

import pytest

from calcgraph.registry import (
    CONSTANTS,
    IDENTIFIERS,
    FunctionKind,
    binary_entropy,
    lookup_constant,
    lookup_function,
)


def test_function_kinds_cover_calculator_buttons() -> None:
    names = {kind.value for kind in FunctionKind}
    assert names == {
        "sin", "cos", "tan", "asin", "acos", "atan",
        "log", "ln", "sqrt", "exp", "entropy",
    }


def test_log_is_base_ten_and_ln_is_natural() -> None:
    assert FunctionKind.LOG(1000.0) == pytest.approx(3.0)
    assert FunctionKind.LN(math.e) == pytest.approx(1.0)


def test_domain_errors_return_nan_without_warnings() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert math.isnan(FunctionKind.SQRT(-1.0))
        assert math.isnan(FunctionKind.ASIN(2.0))
        assert FunctionKind.LN(0.0) == -math.inf
        assert FunctionKind.EXP(1000.0) == math.inf


def test_functions_return_plain_floats() -> None:
    assert type(FunctionKind.SIN(0.0)) is float


@pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 2.0])
def test_binary_entropy_is_zero_outside_open_unit_interval(p: float) -> None:
    assert binary_entropy(p) == 0.0


def test_binary_entropy_values() -> None:
    assert binary_entropy(0.5) == 1.0
    expected = -(0.25 * math.log2(0.25) + 0.75 * math.log2(0.75))
    assert binary_entropy(0.25) == pytest.approx(expected)
    assert binary_entropy(0.25) == pytest.approx(binary_entropy(0.75))


def test_identifiers_are_ordered_longest_first() -> None:
    assert IDENTIFIERS.index("exp") < IDENTIFIERS.index("e")
    assert IDENTIFIERS.index("entropy") < IDENTIFIERS.index("e")
    assert IDENTIFIERS.index("asin") < IDENTIFIERS.index("sin")
    assert "x" in IDENTIFIERS


def test_lookups() -> None:
    assert lookup_function("atan") is FunctionKind.ATAN
    assert lookup_function("Sin") is None
    assert lookup_constant("tau") == pytest.approx(2 * math.pi)
    assert lookup_constant("phi") is None


def test_constants_are_read_only() -> None:
    with pytest.raises(TypeError):
        CONSTANTS["pi"] = 3.0  # type: ignore[index]

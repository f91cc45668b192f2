"""Tests for parenthesis repair, tokenizing, identifier splitting and the expression parser."""

from __future__ import annotations

import pytest

from calcgraph.errors import ExpressionTooLong, InvalidToken, UnbalancedParens
from calcgraph.expression_parser import parse_expression, repair_parentheses, tokenize
from calcgraph.expression_tree import Call, Chain, Constant, Group, Negate, Number, Variable
from calcgraph.registry import FunctionKind


def _kinds(text: str) -> list[tuple[str, str]]:
    return [(token.kind, token.text) for token in tokenize(text)]


def test_tokenize_numbers_operators_and_parens() -> None:
    assert _kinds("1.5 + (2e3*.5)") == [
        ("number", "1.5"),
        ("operator", "+"),
        ("lparen", "("),
        ("number", "2e3"),
        ("operator", "*"),
        ("number", ".5"),
        ("rparen", ")"),
    ]


def test_tokenize_splits_letter_runs_by_longest_match() -> None:
    assert _kinds("2pix") == [("number", "2"), ("name", "pi"), ("name", "x")]
    assert _kinds("exp(1)")[0] == ("name", "exp")
    assert _kinds("entropy(x)")[0] == ("name", "entropy")
    assert _kinds("asin(x)")[0] == ("name", "asin")
    assert _kinds("ex") == [("name", "e"), ("name", "x")]


def test_tokenize_exponent_needs_digits() -> None:
    assert _kinds("2e") == [("number", "2"), ("name", "e")]
    assert _kinds("2exp(0)")[:2] == [("number", "2"), ("name", "exp")]


def test_tokenize_literal_words_are_numbers() -> None:
    tokens = tokenize("inf", allow_names=False)
    assert tokens[0].kind == "number"
    assert tokens[0].value == float("inf")


def test_tokenize_reports_position_of_bad_input() -> None:
    with pytest.raises(InvalidToken) as excinfo:
        tokenize("2 + $")
    assert excinfo.value.position == 4

    with pytest.raises(InvalidToken) as excinfo:
        tokenize("1+abc")
    assert excinfo.value.position == 2


def test_tokenize_rejects_names_in_pure_arithmetic() -> None:
    with pytest.raises(InvalidToken, match="not allowed"):
        tokenize("2*x", allow_names=False)


def test_repair_parentheses_closes_open_groups() -> None:
    assert repair_parentheses("((1") == "((1))"
    assert repair_parentheses("(1)") == "(1)"
    assert repair_parentheses("") == ""


def test_repair_parentheses_rejects_stray_close() -> None:
    with pytest.raises(UnbalancedParens) as excinfo:
        repair_parentheses("(1))(")
    assert excinfo.value.position == 3


def test_parse_implicit_multiplication() -> None:
    assert parse_expression("2x") == Chain((Number(2.0), Variable()), ("*",))
    assert parse_expression("2(1)") == Chain(
        (Number(2.0), Group(Chain((Number(1.0),), ()))), ("*",)
    )


def test_parse_negation_binds_to_next_operand() -> None:
    assert parse_expression("-2^2") == Chain((Negate(Number(2.0)), Number(2.0)), ("^",))
    assert parse_expression("3--x") == Chain((Number(3.0), Negate(Variable())), ("-",))
    assert parse_expression("+pi") == Chain((Constant("pi"),), ())


def test_parse_nested_calls() -> None:
    inner = Call(FunctionKind.COS, Chain((Number(0.0),), ()))
    assert parse_expression("sin(cos(0))") == Chain(
        (Call(FunctionKind.SIN, Chain((inner,), ())),), ()
    )


def test_parse_auto_closes_function_argument() -> None:
    assert parse_expression("sqrt(x") == Chain(
        (Call(FunctionKind.SQRT, Chain((Variable(),), ())),), ()
    )


@pytest.mark.parametrize("text", ["", "2+", "*2", "()", "sin()", "sin 2", "sinx(1)", "2,3"])
def test_parse_invalid_tokens(text: str) -> None:
    with pytest.raises(InvalidToken):
        parse_expression(text)


def test_parse_length_cap() -> None:
    parse_expression("1" * 256)
    with pytest.raises(ExpressionTooLong):
        parse_expression("1" * 257)
    parse_expression("1" * 257, max_length=None)


def test_parse_requires_string() -> None:
    with pytest.raises(TypeError):
        parse_expression(42)  # type: ignore[arg-type]


def test_tokenize_backs_off_when_longest_name_dead_ends() -> None:
    assert _kinds("expi") == [("name", "e"), ("name", "x"), ("name", "pi")]
    assert _kinds("exp(expi)")[:2] == [("name", "exp"), ("lparen", "(")]
    with pytest.raises(InvalidToken) as info:
        tokenize("expq")
    assert info.value.position == 3


def test_parse_limits_nesting_depth() -> None:
    parse_expression("(" * 100 + "1")
    parse_expression("-" * 100 + "1")
    with pytest.raises(InvalidToken, match="nests deeper"):
        parse_expression("(" * 2000 + "1", max_length=None)
    with pytest.raises(InvalidToken, match="nests deeper"):
        parse_expression("-" * 2000 + "1", max_length=None)
    with pytest.raises(InvalidToken, match="nests deeper"):
        parse_expression("sqrt(" * 200 + "1", max_length=None)

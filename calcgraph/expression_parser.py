"""Tokenizer and recursive-descent parser for calculator expressions.

Grammar (whitespace ignored)::

    chain   := operand (operator? operand)*
    operand := ("-" | "+") operand
             | number
             | "x" | constant
             | function "(" chain ")"
             | "(" chain ")"

A missing operator between two operands is an implicit ``*``, so ``2x``,
``2(3+4)`` and ``(1)(2)`` all multiply. Runs of letters are split by longest
match against the known names, backing off to shorter names when the longest
one leaves an unreadable tail. This keeps ``exp`` and ``entropy`` intact next
to the constant ``e``, reads ``2pix`` as ``2*pi*x`` and ``expi`` as ``e*x*pi``.

Nesting of groups, calls and signs is limited to ``MAX_NESTING_DEPTH``
levels so that no input can exhaust the interpreter stack.

Before tokenizing, the raw text is checked for balanced parentheses: a stray
``)`` is an error, while groups left open at the end are closed
automatically.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .config import MAX_EXPRESSION_LENGTH, MAX_NESTING_DEPTH
from .errors import ExpressionTooLong, InvalidToken, UnbalancedParens
from .expression_tree import (
    Call,
    Chain,
    Constant,
    Group,
    Negate,
    Node,
    Number,
    Variable,
)
from .reducer import TokenStream, is_operator
from .registry import (
    IDENTIFIERS,
    LITERAL_WORDS,
    VARIABLE_NAME,
    lookup_constant,
    lookup_function,
)

__all__ = [
    "ExpressionParser",
    "Token",
    "parse_expression",
    "repair_parentheses",
    "tokenize",
]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

NUMBER = "number"
NAME = "name"
OPERATOR = "operator"
LPAREN = "lparen"
RPAREN = "rparen"

_NUMBER_RE = re.compile(r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_NAME_RE = re.compile(r"[A-Za-z_]+")


@dataclass(frozen=True)
class Token:
    """One lexical token and its offset in the source text."""

    kind: str
    text: str
    position: int
    value: Optional[float] = None


def repair_parentheses(text: str) -> str:
    """Return ``text`` with unclosed groups closed at the end.

    Raises
    ------
    UnbalancedParens
        If a ``)`` appears while no group is open.

    Examples
    --------
    >>> repair_parentheses("sin(x")
    'sin(x)'
    """
    open_count = 0
    for index, char in enumerate(text):
        if char == "(":
            open_count += 1
        elif char == ")":
            if open_count == 0:
                raise UnbalancedParens(
                    "Closing parenthesis without a matching '('",
                    expression=text,
                    position=index,
                )
            open_count -= 1
    if open_count:
        logger.debug("Auto-closing %d parenthesis group(s) in %r", open_count, text)
    return text + ")" * open_count


def _split_identifier(run: str, start: int, text: str) -> list[tuple[str, int]]:
    """Split a run of letters into known names.

    At each position the longest name is tried first; when that leaves a
    remainder no split can cover, shorter names are tried, so ``expi`` reads
    as ``e``, ``x``, ``pi``. A run with no complete split is an error,
    reported where the longest-first reading gets stuck.
    """
    # splits[i] is the chosen name at i for a complete split of run[i:].
    splits: list[Optional[str]] = [None] * len(run)
    for i in range(len(run) - 1, -1, -1):
        for name in IDENTIFIERS:
            end = i + len(name)
            if run.startswith(name, i) and (end == len(run) or splits[end] is not None):
                splits[i] = name
                break

    if splits and splits[0] is None:
        pos = 0
        while pos < len(run):
            name = next((n for n in IDENTIFIERS if run.startswith(n, pos)), None)
            if name is None:
                break
            pos += len(name)
        raise InvalidToken(
            f"Unknown name {run[pos:]!r}", expression=text, position=start + pos
        )

    pieces = []
    pos = 0
    while pos < len(run):
        name = splits[pos]
        pieces.append((name, start + pos))
        pos += len(name)
    return pieces


def tokenize(text: str, *, allow_names: bool = True) -> list[Token]:
    """Split ``text`` into tokens.

    With ``allow_names=False`` only numbers, operators and parentheses are
    accepted (plus the literal words ``inf`` and ``nan``).

    Raises
    ------
    InvalidToken
        On an unknown character or name.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char.isspace():
            pos += 1
            continue

        match = _NUMBER_RE.match(text, pos)
        if match:
            tokens.append(Token(NUMBER, match.group(), pos, float(match.group())))
            pos = match.end()
            continue

        if is_operator(char):
            tokens.append(Token(OPERATOR, char, pos))
        elif char == "(":
            tokens.append(Token(LPAREN, char, pos))
        elif char == ")":
            tokens.append(Token(RPAREN, char, pos))
        else:
            match = _NAME_RE.match(text, pos)
            if not match:
                raise InvalidToken(
                    f"Unexpected character {char!r}", expression=text, position=pos
                )
            for name, start in _split_identifier(match.group(), pos, text):
                if name in LITERAL_WORDS:
                    tokens.append(Token(NUMBER, name, start, LITERAL_WORDS[name]))
                elif allow_names:
                    tokens.append(Token(NAME, name, start))
                else:
                    raise InvalidToken(
                        f"Name {name!r} is not allowed in pure arithmetic",
                        expression=text,
                        position=start,
                    )
            pos = match.end()
            continue
        pos += 1
    return tokens


class ExpressionParser:
    """Recursive-descent parser over a token list.

    Parameters
    ----------
    text : str
        Expression with balanced parentheses (see :func:`repair_parentheses`).
    allow_names : bool, optional
        Whether ``x``, constants and function calls are accepted.
    """

    def __init__(self, text: str, *, allow_names: bool = True) -> None:
        self.text = text
        self.tokens = tokenize(text, allow_names=allow_names)
        self.pos = 0
        self.depth = 0

    def parse(self) -> Chain:
        chain = self._chain()
        leftover = self._peek()
        if leftover is not None:
            raise UnbalancedParens(
                "Closing parenthesis without a matching '('",
                expression=self.text,
                position=leftover.position,
            )
        return chain

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> Optional[Token]:
        token = self._peek()
        if token is not None:
            self.pos += 1
        return token

    def _chain(self) -> Chain:
        stream = TokenStream()
        stream.push_value(self._operand())
        while True:
            token = self._peek()
            if token is None or token.kind == RPAREN:
                break
            if token.kind == OPERATOR:
                self.pos += 1
                stream.push_operator(token.text)
            else:
                # implicit multiplication
                stream.push_operator("*")
            stream.push_value(self._operand())
        return Chain(tuple(stream.values), tuple(stream.operators))

    def _close_group(self) -> None:
        token = self._next()
        if token is None or token.kind != RPAREN:
            position = token.position if token is not None else len(self.text)
            raise InvalidToken("Expected ')'", expression=self.text, position=position)

    def _operand(self) -> Node:
        if self.depth >= MAX_NESTING_DEPTH:
            token = self._peek()
            raise InvalidToken(
                f"Expression nests deeper than {MAX_NESTING_DEPTH} levels",
                expression=self.text,
                position=token.position if token is not None else len(self.text),
            )
        self.depth += 1
        try:
            return self._read_operand()
        finally:
            self.depth -= 1

    def _read_operand(self) -> Node:
        token = self._next()
        if token is None:
            raise InvalidToken(
                "Expected a value at end of expression",
                expression=self.text,
                position=len(self.text),
            )

        if token.kind == OPERATOR and token.text in ("-", "+"):
            operand = self._operand()
            return Negate(operand) if token.text == "-" else operand
        if token.kind == NUMBER:
            return Number(token.value)
        if token.kind == LPAREN:
            body = self._chain()
            self._close_group()
            return Group(body)
        if token.kind == NAME:
            return self._named(token)

        raise InvalidToken(
            f"Expected a value, found {token.text!r}",
            expression=self.text,
            position=token.position,
        )

    def _named(self, token: Token) -> Node:
        if token.text == VARIABLE_NAME:
            return Variable()
        if lookup_constant(token.text) is not None:
            return Constant(token.text)

        kind = lookup_function(token.text)
        following = self._next()
        if kind is None or following is None or following.kind != LPAREN:
            raise InvalidToken(
                f"Function {token.text!r} must be followed by '('",
                expression=self.text,
                position=token.position,
            )
        argument = self._chain()
        self._close_group()
        return Call(kind, argument)


def parse_expression(
    text: str,
    *,
    allow_names: bool = True,
    max_length: Optional[int] = MAX_EXPRESSION_LENGTH,
) -> Chain:
    """Parse ``text`` into an expression tree.

    Parameters
    ----------
    text : str
        Raw expression, e.g. ``"2sin(x"``.
    allow_names : bool, optional
        If False, only pure arithmetic is accepted.
    max_length : int or None, optional
        Maximum raw length; ``None`` disables the check.

    Returns
    -------
    Chain
        Root of the parsed tree.

    Raises
    ------
    TypeError
        If ``text`` is not a string.
    EvaluationError
        ``ExpressionTooLong``, ``UnbalancedParens`` or ``InvalidToken``.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expression must be a string, got {type(text).__name__}")
    if max_length is not None and len(text) > max_length:
        raise ExpressionTooLong(
            f"Expression has {len(text)} characters; the limit is {max_length}"
        )
    return ExpressionParser(repair_parentheses(text), allow_names=allow_names).parse()

"""Recursive-descent parser for calculator expressions.

Grammar (lowest precedence first)::

    Expr    := Term (("+" | "-") Term)*
    Term    := Power (("*" | "/") Power)*
    Power   := Primary ("^" Power)?
    Primary := "(" Expr [")"]
             | "-" Primary
             | Number
             | Identifier [ "(" ] Expr [ ")" ]      (one-argument functions)
             | Identifier                           (x, X, e, pi, π)

Important gotchas
-----------------
- A function name does not need parentheses, and its argument is a full
  ``Expr``: ``sinx+1`` parses as ``sin(x+1)``.
- A closing ``)`` is optional after ``(``, both for groups and for calls.
  The top-level parse must still consume the whole input, so ``2+3)`` fails.
- Identifiers are matched by name at the cursor, so ``sinx`` splits into
  ``sin`` and ``x``. There is no implicit multiplication: ``2x`` fails.

All parse state lives in a per-call :class:`_ParseState`; the module has no
mutable globals and is safe to use from several threads at once.
"""

from __future__ import annotations

from dataclasses import dataclass

from .expression_nodes import (
    FUNCTION_NAMES,
    BinaryOp,
    Call,
    Constant,
    Node,
    Number,
    UnaryMinus,
    Variable,
)

__all__ = ["ExpressionSyntaxError", "parse_expression"]

_DIGITS = frozenset("0123456789")

# Longest names first so that e.g. "sqrt" is not read as something shorter.
_IDENTIFIERS: tuple[str, ...] = tuple(
    sorted(
        (*FUNCTION_NAMES, "pi", "π", "e", "x", "X"),
        key=len,
        reverse=True,
    )
)


class ExpressionSyntaxError(ValueError):
    """Raised when an expression cannot be derived by the grammar.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    source : str
        The full expression text.
    position : int
        Cursor offset where parsing failed.
    """

    def __init__(self, message: str, *, source: str, position: int) -> None:
        super().__init__(f"{message} at position {position} in {source!r}")
        self.source = source
        self.position = position


@dataclass
class _ParseState:
    """Cursor over one expression string."""

    source: str
    pos: int = 0

    def peek(self) -> str:
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def advance(self) -> str:
        ch = self.peek()
        if ch:
            self.pos += 1
        return ch

    def skip_spaces(self) -> None:
        while self.peek().isspace():
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def error(self, message: str) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(message, source=self.source, position=self.pos)


def parse_expression(source: str) -> Node:
    """Parse ``source`` into an expression tree.

    Parameters
    ----------
    source : str
        Expression text, e.g. ``"2*sin(x)^2 - 1"``.

    Returns
    -------
    Node
        Root of the parsed tree.

    Raises
    ------
    ExpressionSyntaxError
        If the grammar cannot derive a complete parse or input remains after
        the top-level expression.

    Examples
    --------
    >>> str(parse_expression("sinx+1"))
    'sin(x + 1)'
    """
    state = _ParseState(source)
    node = _parse_expr(state)
    state.skip_spaces()
    if not state.at_end():
        raise state.error(f"Unexpected {state.peek()!r}")
    return node


def _parse_expr(state: _ParseState) -> Node:
    left = _parse_term(state)
    while True:
        state.skip_spaces()
        op = state.peek()
        if op not in ("+", "-"):
            return left
        state.advance()
        left = BinaryOp(op, left, _parse_term(state))


def _parse_term(state: _ParseState) -> Node:
    left = _parse_power(state)
    while True:
        state.skip_spaces()
        op = state.peek()
        if op not in ("*", "/"):
            return left
        state.advance()
        left = BinaryOp(op, left, _parse_power(state))


def _parse_power(state: _ParseState) -> Node:
    base = _parse_primary(state)
    state.skip_spaces()
    if state.peek() != "^":
        return base
    state.advance()
    return BinaryOp("^", base, _parse_power(state))


def _parse_primary(state: _ParseState) -> Node:
    state.skip_spaces()
    ch = state.peek()
    if not ch:
        raise state.error("Unexpected end of input")
    if ch == "(":
        state.advance()
        inner = _parse_expr(state)
        _skip_optional_close(state)
        return inner
    if ch == "-":
        state.advance()
        return UnaryMinus(_parse_primary(state))
    if ch in _DIGITS or ch == ".":
        return _parse_number(state)
    return _parse_identifier(state)


def _parse_number(state: _ParseState) -> Number:
    start = state.pos
    while state.peek() in _DIGITS:
        state.advance()
    if state.peek() == ".":
        state.advance()
        while state.peek() in _DIGITS:
            state.advance()
    text = state.source[start : state.pos]
    if text == ".":
        state.pos = start
        raise state.error("Malformed number")
    return Number(float(text))


def _parse_identifier(state: _ParseState) -> Node:
    name = next(
        (ident for ident in _IDENTIFIERS if state.source.startswith(ident, state.pos)),
        None,
    )
    if name is None:
        ch = state.peek()
        if ch.isalpha() or ch == "_":
            end = state.pos
            while end < len(state.source) and (
                state.source[end].isalnum() or state.source[end] == "_"
            ):
                end += 1
            raise state.error(f"Unknown identifier {state.source[state.pos:end]!r}")
        raise state.error(f"Unexpected {ch!r}")

    state.pos += len(name)
    if name in ("x", "X"):
        return Variable()
    if name == "e":
        return Constant("e")
    if name in ("pi", "π"):
        return Constant("pi")
    return _parse_call(state, name)


def _parse_call(state: _ParseState, name: str) -> Call:
    state.skip_spaces()
    opened = state.peek() == "("
    if opened:
        state.advance()
    arg = _parse_expr(state)
    if opened:
        _skip_optional_close(state)
    return Call(name, arg)


def _skip_optional_close(state: _ParseState) -> None:
    state.skip_spaces()
    if state.peek() == ")":
        state.advance()

"""Tagged expression tree produced by :mod:`graphcalc.expression_parser`.

Purpose
-------
Parsed calculator expressions are represented as small immutable dataclasses
rather than opaque closures. The tree supports structural equality (handy in
tests), canonical text printing, and conversion to SymPy for display.

Concepts and structure
----------------------
- ``Number`` / ``Variable`` / ``Constant`` are leaves.
- ``UnaryMinus`` negates a primary.
- ``BinaryOp`` covers ``+ - * / ^``.
- ``Call`` applies one of the fixed one-argument functions.

Numeric evaluation lives in :mod:`graphcalc.expression_engine`; this module
never evaluates anything.

Examples
--------
>>> from graphcalc.expression_nodes import BinaryOp, Number, Variable
>>> str(BinaryOp("*", BinaryOp("+", Variable(), Number(1.0)), Number(2.0)))
'(x + 1) * 2'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
import sympy as sp

FUNCTION_NAMES: tuple[str, ...] = ("sin", "cos", "tan", "log", "ln", "sqrt", "abs")
TRIG_FUNCTIONS = frozenset({"sin", "cos", "tan"})
CONSTANT_NAMES: tuple[str, ...] = ("e", "pi")
BINARY_OPERATORS: tuple[str, ...] = ("+", "-", "*", "/", "^")

_PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3}
_UNARY_PRECEDENCE = 4
_ATOM_PRECEDENCE = 5


@dataclass(frozen=True)
class Number:
    """Non-negative numeric literal. Negative literals parse as ``UnaryMinus``."""

    value: float

    def __str__(self) -> str:
        return np.format_float_positional(self.value, trim="-")


@dataclass(frozen=True)
class Variable:
    """The independent variable ``x``."""

    name: str = "x"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Constant:
    """Named constant, either ``"e"`` or ``"pi"``."""

    name: str

    def __post_init__(self) -> None:
        if self.name not in CONSTANT_NAMES:
            raise ValueError(f"Unknown constant: {self.name!r}")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class UnaryMinus:
    operand: "Node"

    def __str__(self) -> str:
        return "-" + _wrap(self.operand, _precedence(self.operand) < _UNARY_PRECEDENCE)


@dataclass(frozen=True)
class BinaryOp:
    """Binary arithmetic node; ``op`` is one of ``+ - * / ^``."""

    op: str
    left: "Node"
    right: "Node"

    def __post_init__(self) -> None:
        if self.op not in BINARY_OPERATORS:
            raise ValueError(f"Unknown operator: {self.op!r}")

    def __str__(self) -> str:
        own = _PRECEDENCE[self.op]
        left_prec = _precedence(self.left)
        right_prec = _precedence(self.right)
        if self.op == "^":
            # right-associative
            left_parens = left_prec <= own
            right_parens = right_prec < own
        else:
            left_parens = left_prec < own
            right_parens = right_prec <= own
        left = _wrap(self.left, left_parens)
        right = _wrap(self.right, right_parens)
        if self.op == "^":
            return f"{left}^{right}"
        return f"{left} {self.op} {right}"


@dataclass(frozen=True)
class Call:
    """One-argument function application such as ``sin(x)``."""

    name: str
    arg: "Node"

    def __post_init__(self) -> None:
        if self.name not in FUNCTION_NAMES:
            raise ValueError(f"Unknown function: {self.name!r}")

    def __str__(self) -> str:
        return f"{self.name}({self.arg})"


Node = Union[Number, Variable, Constant, UnaryMinus, BinaryOp, Call]


def _precedence(node: Node) -> int:
    if isinstance(node, BinaryOp):
        return _PRECEDENCE[node.op]
    if isinstance(node, UnaryMinus):
        return _UNARY_PRECEDENCE
    return _ATOM_PRECEDENCE


def _wrap(node: Node, parens: bool) -> str:
    text = str(node)
    return f"({text})" if parens else text


def to_sympy(node: Node, *, degrees: bool = False) -> sp.Expr:
    """Convert an expression tree to a SymPy expression.

    Parameters
    ----------
    node : Node
        Parsed expression tree.
    degrees : bool, default=False
        When True, trig arguments are wrapped in ``pi/180`` so the symbolic
        form agrees with degree-mode evaluation.

    Returns
    -------
    sympy.Expr
        Symbolic counterpart in the variable ``x``. Intended for display only;
        SymPy may canonicalise the result.
    """
    if isinstance(node, Number):
        if float(node.value).is_integer():
            return sp.Integer(int(node.value))
        return sp.Float(node.value)
    if isinstance(node, Variable):
        return sp.Symbol("x")
    if isinstance(node, Constant):
        return sp.E if node.name == "e" else sp.pi
    if isinstance(node, UnaryMinus):
        return -to_sympy(node.operand, degrees=degrees)
    if isinstance(node, BinaryOp):
        left = to_sympy(node.left, degrees=degrees)
        right = to_sympy(node.right, degrees=degrees)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if node.op == "/":
            return left / right
        return left**right
    if isinstance(node, Call):
        arg = to_sympy(node.arg, degrees=degrees)
        if node.name in TRIG_FUNCTIONS:
            if degrees:
                arg = arg * sp.pi / 180
            return getattr(sp, node.name)(arg)
        if node.name == "log":
            return sp.log(arg, 10)
        if node.name == "ln":
            return sp.log(arg)
        if node.name == "sqrt":
            return sp.sqrt(arg)
        return sp.Abs(arg)
    raise TypeError(f"Unsupported expression node: {type(node).__name__}")


__all__ = [
    "BinaryOp",
    "Call",
    "Constant",
    "FUNCTION_NAMES",
    "Node",
    "Number",
    "UnaryMinus",
    "Variable",
    "to_sympy",
]

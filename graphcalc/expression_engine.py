"""
expression_engine: compile calculator expressions to NumPy-backed evaluators
=============================================================================

Purpose
-------
Turn a text expression plus an angle mode into an :class:`Evaluator`, a pure
callable ``x -> y``. This is the single entry point used by plotting, the value
table, and calculator mode.

Public API
----------
- :class:`AngleMode`
- :class:`Evaluator`
- :func:`compile_expression`
- :func:`compile_cached`
- :func:`evaluate`

Numeric semantics
-----------------
Evaluation runs NumPy ufuncs under ``np.errstate(all="ignore")`` so results
follow IEEE-754 instead of raising:

>>> evaluate("1/0", 0)
inf
>>> import math; math.isnan(evaluate("log(-1)", 0))
True

Evaluators accept scalars (returning ``float``) and arrays (returning an array
of the same shape), so a plot can be sampled in one vectorised call.

Failure handling
----------------
``compile_expression`` returns ``None`` on a syntax failure and ``evaluate``
returns ``nan``; nothing raises across this boundary.

Logging
-------
This module uses Python's standard :mod:`logging` library and is silent by
default. Compile failures and cache misses are logged at DEBUG:

>>> import logging
>>> logging.getLogger("graphcalc.expression_engine").setLevel(logging.DEBUG)  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache, partial
from typing import Any, Callable, Union

import numpy as np
import sympy as sp

from .expression_nodes import (
    BinaryOp,
    Call,
    Constant,
    Node,
    Number,
    TRIG_FUNCTIONS,
    UnaryMinus,
    Variable,
    to_sympy,
)
from .expression_parser import ExpressionSyntaxError, parse_expression

__all__ = [
    "AngleMode",
    "AngleModeLike",
    "Evaluator",
    "compile_cached",
    "compile_expression",
    "evaluate",
    "resolve_angle_mode",
]


logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

_COMPILE_CACHE_MAXSIZE = 256


class AngleMode(str, Enum):
    """Unit used for trig-function arguments."""

    RADIANS = "rad"
    DEGREES = "deg"


AngleModeLike = Union[AngleMode, str]

_ANGLE_MODE_ALIASES = {
    "rad": AngleMode.RADIANS,
    "radian": AngleMode.RADIANS,
    "radians": AngleMode.RADIANS,
    "deg": AngleMode.DEGREES,
    "degree": AngleMode.DEGREES,
    "degrees": AngleMode.DEGREES,
}


def resolve_angle_mode(mode: AngleModeLike) -> AngleMode:
    """Normalise an :class:`AngleMode` or one of its string aliases.

    Raises
    ------
    ValueError
        If ``mode`` is not a recognised angle mode.
    """
    if isinstance(mode, AngleMode):
        return mode
    if isinstance(mode, str):
        resolved = _ANGLE_MODE_ALIASES.get(mode.strip().lower())
        if resolved is not None:
            return resolved
    raise ValueError(f"Unknown angle mode: {mode!r} (expected 'rad' or 'deg')")


_Lowered = Callable[[np.ndarray], Any]

# Postfix instructions: (opcode, operand).
_LOAD, _INPUT, _APPLY1, _APPLY2 = range(4)
_Program = tuple[tuple[int, Any], ...]

_UNARY_UFUNCS: dict[str, Callable[[Any], Any]] = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "log": np.log10,
    "ln": np.log,
    "sqrt": np.sqrt,
    "abs": np.abs,
}

_BINARY_UFUNCS: dict[str, Callable[[Any, Any], Any]] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
}


def _in_degrees(ufunc: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda v: ufunc(v * np.pi / 180)


def _lower(tree: Node, angle_mode: AngleMode) -> _Program:
    """Flatten a tree into a postfix program over NumPy ufuncs.

    The walk uses an explicit stack, so long operator chains such as
    ``1+1+...+1`` compile and run at any length. ``angle_mode`` is applied to
    every trig call here; the program never consults shared state.
    """
    program: list[tuple[int, Any]] = []
    pending: list[tuple[Node, bool]] = [(tree, False)]
    while pending:
        node, children_done = pending.pop()
        if isinstance(node, Number):
            program.append((_LOAD, np.float64(node.value)))
        elif isinstance(node, Variable):
            program.append((_INPUT, None))
        elif isinstance(node, Constant):
            program.append((_LOAD, np.float64(math.e if node.name == "e" else math.pi)))
        elif isinstance(node, UnaryMinus):
            if children_done:
                program.append((_APPLY1, np.negative))
            else:
                pending += [(node, True), (node.operand, False)]
        elif isinstance(node, BinaryOp):
            if children_done:
                program.append((_APPLY2, _BINARY_UFUNCS[node.op]))
            else:
                pending += [(node, True), (node.right, False), (node.left, False)]
        elif isinstance(node, Call):
            if children_done:
                ufunc = _UNARY_UFUNCS[node.name]
                if node.name in TRIG_FUNCTIONS and angle_mode is AngleMode.DEGREES:
                    ufunc = _in_degrees(ufunc)
                program.append((_APPLY1, ufunc))
            else:
                pending += [(node, True), (node.arg, False)]
        else:
            raise TypeError(f"Unsupported expression node: {type(node).__name__}")
    return tuple(program)


def _run(program: _Program, x: Any) -> Any:
    stack: list[Any] = []
    for opcode, operand in program:
        if opcode == _LOAD:
            stack.append(operand)
        elif opcode == _INPUT:
            stack.append(x)
        elif opcode == _APPLY1:
            stack[-1] = operand(stack[-1])
        else:
            right = stack.pop()
            stack[-1] = operand(stack[-1], right)
    return stack[-1]


@dataclass(frozen=True)
class Evaluator:
    """Compiled expression: a side-effect-free mapping ``x -> y``.

    Parameters
    ----------
    source : str
        Expression text the evaluator was compiled from.
    tree : Node
        Parsed expression tree.
    angle_mode : AngleMode
        Angle mode captured at compile time.

    Notes
    -----
    Instances are immutable and hold no per-call state, so one evaluator can be
    shared between threads and reused from caches.
    """

    source: str
    tree: Node = field(repr=False)
    angle_mode: AngleMode
    _fn: _Lowered = field(repr=False, compare=False)

    def __call__(self, x: Any) -> Any:
        values = np.asarray(x, dtype=float)
        with np.errstate(all="ignore"):
            result = np.asarray(self._fn(values), dtype=float)
        if values.ndim == 0:
            return float(result)
        return np.broadcast_to(result, values.shape).copy()

    @property
    def symbolic(self) -> sp.Expr:
        """Return a SymPy expression for display (legend text, LaTeX)."""
        return to_sympy(self.tree, degrees=self.angle_mode is AngleMode.DEGREES)

    def __str__(self) -> str:
        return str(self.tree)


def compile_expression(
    source: str, angle_mode: AngleModeLike = AngleMode.RADIANS
) -> Evaluator | None:
    """Compile ``source`` into an :class:`Evaluator`.

    Parameters
    ----------
    source : str
        Expression text such as ``"x^2 - 3"``.
    angle_mode : AngleMode or str, default=AngleMode.RADIANS
        Unit for trig-function arguments.

    Returns
    -------
    Evaluator or None
        ``None`` signals a syntax failure.

    Raises
    ------
    ValueError
        If ``angle_mode`` is not a recognised angle mode.

    Examples
    --------
    >>> f = compile_expression("2^3^2")
    >>> f(0)
    512.0
    >>> compile_expression("2+3)") is None
    True
    """
    mode = resolve_angle_mode(angle_mode)
    text = str(source)
    try:
        tree = parse_expression(text)
    except ExpressionSyntaxError as exc:
        logger.debug("compile_expression: syntax failure: %s", exc)
        return None
    except RecursionError:
        logger.debug("compile_expression: nesting too deep in %r", text)
        return None
    return Evaluator(source=text, tree=tree, angle_mode=mode, _fn=partial(_run, _lower(tree, mode)))


@lru_cache(maxsize=_COMPILE_CACHE_MAXSIZE)
def _compile_cached_impl(source: str, angle_mode: AngleMode) -> Evaluator | None:
    # NOTE: only runs on cache misses.
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("compile_cached: cache MISS (source=%r, angle_mode=%s)", source, angle_mode.value)
    return compile_expression(source, angle_mode)


def compile_cached(
    source: str, angle_mode: AngleModeLike = AngleMode.RADIANS
) -> Evaluator | None:
    """Cached version of :func:`compile_expression`.

    The cache key is the expression text and the resolved angle mode. Failed
    compiles are cached too. Call ``compile_cached.cache_clear()`` to reset.
    """
    return _compile_cached_impl(str(source), resolve_angle_mode(angle_mode))


compile_cached.cache_info = _compile_cached_impl.cache_info  # type: ignore[attr-defined]
compile_cached.cache_clear = _compile_cached_impl.cache_clear  # type: ignore[attr-defined]


def evaluate(
    source: str, x: float, angle_mode: AngleModeLike = AngleMode.RADIANS
) -> float:
    """Evaluate ``source`` at ``x``.

    Returns
    -------
    float
        The result, or ``nan`` on a syntax failure or any evaluation fault.
        Ordinary floating-point outcomes such as ``inf`` are returned as is.

    Raises
    ------
    ValueError
        If ``angle_mode`` is not a recognised angle mode.
    """
    mode = resolve_angle_mode(angle_mode)
    try:
        evaluator = compile_cached(source, mode)
        if evaluator is None:
            return math.nan
        return float(evaluator(x))
    except Exception as exc:
        logger.debug("evaluate(%r, x=%r) failed: %s", source, x, exc)
        return math.nan

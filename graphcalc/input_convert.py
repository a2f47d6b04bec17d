# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from numbers import Real
from typing import Any

import sympy as sp

_SYMPY_LOCALS = {"e": sp.E, "pi": sp.pi, "π": sp.pi}


def coerce_real(obj: Any, *, name: str = "value") -> float:
    """
    Convert `obj` to a finite float, as needed for window bounds.

    Rules:
    - If `obj` is a real number (int, float, NumPy scalar): cast via float(obj).
    - If `obj` is a string:
        1) try float(s)
        2) else parse as a SymPy expression (so "-2*pi" or "e^2" work),
           then evaluate numerically.
    - Booleans are rejected even though they subclass int.

    Raises
    ------
    TypeError
        If `obj` is neither a real number nor a string.
    ValueError
        If conversion fails, the value has a non-zero imaginary part, or the
        value is not finite.
    """
    if isinstance(obj, bool):
        raise TypeError(f"{name} must be a real number, got bool")

    if isinstance(obj, Real):
        value = float(obj)
    elif isinstance(obj, str):
        value = _parse_real_text(obj, name=name)
    else:
        raise TypeError(f"{name} must be a real number or string, got {type(obj).__name__}")

    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return value


def _parse_real_text(text: str, *, name: str) -> float:
    s = text.strip()
    if s == "":
        raise ValueError(f"Cannot convert empty string to {name}.")

    # 1) Plain native conversion
    try:
        return float(s)
    except ValueError:
        pass

    # 2) SymPy path; "^" is accepted as power like in expression slots
    try:
        expr = sp.sympify(s.replace("^", "**"), locals=_SYMPY_LOCALS)
        val = complex(expr.evalf())
    except Exception as e:
        raise ValueError(f"Could not convert {text!r} to {name} (neither directly nor via SymPy).") from e

    if val.imag != 0:
        raise ValueError(f"Could not convert non-real {text!r} to {name}: imaginary part is non-zero.")
    return val.real

# === END OF SECTION: InputConvert [id: InputConvert]===

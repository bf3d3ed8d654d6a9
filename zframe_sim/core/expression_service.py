# -*- coding: utf-8 -*-
"""Numeric expressions for settings fields.

Limit and saved-position fields accept plain numbers or short expressions
such as ``90 - 5`` or ``deg(pi/4)``. They are parsed with SymPy against a
small namespace; any symbol outside it (and outside ``names``) is an error.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Tuple

import sympy as sp


def _deg(x: Any) -> Any:
    return x * 180 / sp.pi


def _rad(x: Any) -> Any:
    return x * sp.pi / 180


_FIELD_NAMESPACE: Dict[str, Any] = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
    "min": sp.Min,
    "max": sp.Max,
    "deg": _deg,
    "rad": _rad,
    "pi": sp.pi,
    "PI": sp.pi,
    "E": sp.E,
}


def _parse(expr: str, names: Dict[str, float]) -> sp.Basic:
    namespace = dict(_FIELD_NAMESPACE)
    namespace.update({name: sp.Symbol(name) for name in names})
    # ``^`` is power in field input, as in the formula box.
    return sp.sympify(expr.replace("^", "**"), locals=namespace)


def eval_number_expression(expr: str, names: Optional[Dict[str, float]] = None) -> Tuple[Optional[float], Optional[str]]:
    """Evaluate a numeric field.

    Returns (value, error_message). If evaluation fails, value is None.
    """
    expr = (expr or "").strip()
    if not expr:
        return None, "Empty expression"
    names = dict(names or {})

    try:
        parsed = _parse(expr, names)
    except Exception as ex:
        return None, f"Parse error: {ex}"

    unknown = sorted(str(s) for s in getattr(parsed, "free_symbols", set()) if str(s) not in names)
    if unknown:
        return None, f"Unknown symbol(s): {', '.join(unknown)}"

    try:
        val = float(parsed.evalf(subs={sp.Symbol(k): float(v) for k, v in names.items()}))
    except Exception as ex:
        return None, f"Eval error: {ex}"
    if not math.isfinite(val):
        return None, "Expression is not finite"
    return val, None

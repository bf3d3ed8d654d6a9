# -*- coding: utf-8 -*-
"""Formula binding: derive one joint angle from the others with a user expression.

Expressions are parsed with :mod:`ast` and evaluated by a small interpreter
over a whitelisted set of nodes; nothing is passed to ``eval``.

Allowed: numbers, ``+ - * /``, ``^`` and ``**`` (power), parentheses,
``sin cos tan sqrt abs min max pow``, ``PI``/``pi`` and the variables
``angle1 angle2 angle3`` (degrees). Trig functions take radians.
"""

from __future__ import annotations

import ast
import math
from typing import Any, Callable, Dict, Optional, Tuple

from .geometry import quantize
from .limits import AngleLimits, check_joint
from .state import JointAngleState


class FormulaError(ValueError):
    pass


_FUNCS: Dict[str, Tuple[Callable[..., float], int, Optional[int]]] = {
    # name: (callable, min args, max args or None for unbounded)
    "sin": (math.sin, 1, 1),
    "cos": (math.cos, 1, 1),
    "tan": (math.tan, 1, 1),
    "sqrt": (math.sqrt, 1, 1),
    "abs": (abs, 1, 1),
    "min": (min, 2, None),
    "max": (max, 2, None),
    "pow": (math.pow, 2, 2),
}

_CONSTS: Dict[str, float] = {"PI": math.pi, "pi": math.pi}

VARIABLES = ("angle1", "angle2", "angle3")


class FormulaEvaluator(ast.NodeVisitor):
    def __init__(self, variables: Dict[str, float]):
        self.variables = variables

    def visit_Expression(self, node: ast.Expression) -> float:
        return self.visit(node.body)

    def visit_BinOp(self, node: ast.BinOp) -> float:
        left = self.visit(node.left)
        right = self.visit(node.right)
        if isinstance(node.op, ast.Add):
            return left + right
        if isinstance(node.op, ast.Sub):
            return left - right
        if isinstance(node.op, ast.Mult):
            return left * right
        if isinstance(node.op, ast.Div):
            if right == 0:
                raise FormulaError("Division by zero")
            return left / right
        if isinstance(node.op, ast.Pow):
            try:
                return math.pow(left, right)
            except (OverflowError, ValueError) as exc:
                raise FormulaError(f"Invalid power: {exc}") from exc
        raise FormulaError("Unsupported operator")

    def visit_UnaryOp(self, node: ast.UnaryOp) -> float:
        val = self.visit(node.operand)
        if isinstance(node.op, ast.UAdd):
            return +val
        if isinstance(node.op, ast.USub):
            return -val
        raise FormulaError("Unsupported unary operator")

    def visit_Call(self, node: ast.Call) -> float:
        name = node.func.id  # checked by validate()
        func = _FUNCS[name][0]
        args = [self.visit(a) for a in node.args]
        try:
            return float(func(*args))
        except (OverflowError, ValueError) as exc:
            raise FormulaError(f"{name}(): {exc}") from exc

    def visit_Name(self, node: ast.Name) -> float:
        if node.id in _CONSTS:
            return _CONSTS[node.id]
        return float(self.variables[node.id])

    def visit_Constant(self, node: ast.Constant) -> float:
        try:
            return float(node.value)
        except OverflowError as exc:
            raise FormulaError("Number too large") from exc

    def generic_visit(self, node: ast.AST) -> float:
        raise FormulaError(f"Unsupported expression: {type(node).__name__}")


def validate(tree: ast.AST) -> None:
    """Reject anything outside the whitelisted grammar."""
    called = {id(n.func) for n in ast.walk(tree) if isinstance(n, ast.Call)}
    for node in ast.walk(tree):
        if isinstance(node, (ast.Expression, ast.BinOp, ast.UnaryOp, ast.Load)):
            continue
        if isinstance(node, (ast.Add, ast.Sub, ast.Mult, ast.Div, ast.Pow, ast.UAdd, ast.USub)):
            continue
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise FormulaError("Only numeric constants are allowed")
            if isinstance(node.value, float) and not math.isfinite(node.value):
                raise FormulaError("Only numeric constants are allowed")
            continue
        if isinstance(node, ast.Name):
            if node.id in _FUNCS:
                if id(node) not in called:
                    raise FormulaError(f"{node.id} must be called")
                continue
            if node.id not in _CONSTS and node.id not in VARIABLES:
                raise FormulaError(f"Unknown name: {node.id}")
            continue
        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCS:
                raise FormulaError("Only simple function calls are allowed")
            if node.keywords:
                raise FormulaError("Keyword arguments are not allowed")
            _, lo, hi = _FUNCS[node.func.id]
            n = len(node.args)
            if n < lo or (hi is not None and n > hi):
                raise FormulaError(f"{node.func.id}() got {n} argument(s)")
            continue
        raise FormulaError(f"Unsupported expression: {type(node).__name__}")


def compile_formula(text: str) -> ast.Expression:
    text = (text or "").strip()
    if not text:
        raise FormulaError("Empty expression")
    # ``^`` is power here, with Python's ``**`` precedence.
    text = text.replace("^", "**")
    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError as exc:
        raise FormulaError(f"Parse error: {exc.msg}") from exc
    validate(tree)
    return tree


def evaluate_formula(tree: ast.Expression, angles: JointAngleState) -> float:
    variables = {"angle1": angles.angle1, "angle2": angles.angle2, "angle3": angles.angle3}
    value = FormulaEvaluator(variables).visit(tree)
    if not math.isfinite(value):
        raise FormulaError("Expression is not finite")
    return value


class FormulaBinding:
    """A compiled expression that drives ``target_joint`` from the other angles.

    A failed compile or a non-finite result disables the binding and keeps the
    message in ``error`` until a valid expression is compiled.
    """

    def __init__(self, target_joint: int = 2, quantum: float = 0.5):
        self.target_joint = check_joint(target_joint)
        self.quantum = quantum
        self.text = ""
        self.error: Optional[str] = None
        self._tree: Optional[ast.Expression] = None

    @property
    def enabled(self) -> bool:
        return self._tree is not None

    def clear(self) -> None:
        self.text = ""
        self.error = None
        self._tree = None

    def compile(self, text: str) -> bool:
        self.text = (text or "").strip()
        if not self.text:
            self.clear()
            return False
        try:
            self._tree = compile_formula(self.text)
            self.error = None
            return True
        except FormulaError as exc:
            self._tree = None
            self.error = str(exc)
            return False

    def evaluate(self, angles: JointAngleState) -> Optional[float]:
        if self._tree is None:
            return None
        try:
            return evaluate_formula(self._tree, angles)
        except FormulaError as exc:
            self._tree = None
            self.error = str(exc)
            return None

    def apply(self, angles: JointAngleState, limits: AngleLimits) -> bool:
        """Set the target joint from the formula; True when the angle changed."""
        value = self.evaluate(angles)
        if value is None:
            return False
        new = limits.clamp(self.target_joint, quantize(value, self.quantum))
        if new == angles.get(self.target_joint):
            return False
        angles.set(self.target_joint, new)
        return True


def describe_names() -> Dict[str, Any]:
    """Names accepted in formulas, for UI hints."""
    return {"functions": sorted(_FUNCS), "constants": sorted(_CONSTS), "variables": list(VARIABLES)}

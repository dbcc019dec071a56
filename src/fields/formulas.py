"""Arithmetic formulas for computed fields.

Formulas are small expressions over field ids, for example
``total_income - standard_deduction`` or ``SUM(office_expenses, travel_expenses)``.
They are parsed with ``ast`` and evaluated by walking a whitelist of node
types with Decimal arithmetic; nothing is passed to ``eval``.

Supported: numbers, field ids, ``+ - * /``, unary minus, parentheses and
the functions SUM, MIN, MAX, ABS and ROUND(value, places).
"""

from __future__ import annotations

import ast
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache

from src.core.errors import CalculationError


def _round(value: Decimal, places: Decimal = Decimal("0")) -> Decimal:
    if places != places.to_integral_value():
        raise CalculationError("ROUND places must be a whole number")
    return value.quantize(Decimal(1).scaleb(-int(places)), rounding=ROUND_HALF_UP)


def _require_args(name: str, args: list[Decimal], minimum: int, maximum: int | None) -> None:
    if len(args) < minimum or (maximum is not None and len(args) > maximum):
        raise CalculationError(f"{name} called with {len(args)} argument(s)")


FUNCTIONS: dict[str, tuple[Callable[..., Decimal], int, int | None]] = {
    "SUM": (lambda *args: sum(args, Decimal("0")), 1, None),
    "MIN": (lambda *args: min(args), 1, None),
    "MAX": (lambda *args: max(args), 1, None),
    "ABS": (lambda value: abs(value), 1, 1),
    "ROUND": (_round, 1, 2),
}

_BINARY_OPS: dict[type[ast.operator], Callable[[Decimal, Decimal], Decimal]] = {
    ast.Add: lambda left, right: left + right,
    ast.Sub: lambda left, right: left - right,
    ast.Mult: lambda left, right: left * right,
    ast.Div: lambda left, right: left / right,
}


@dataclass(frozen=True)
class Formula:
    """A parsed formula and the field ids it reads."""

    source: str
    tree: ast.Expression
    names: frozenset[str]


def _check_node(node: ast.AST, names: set[str]) -> None:
    if isinstance(node, ast.Expression):
        _check_node(node.body, names)
    elif isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPS:
            raise CalculationError(f"Unsupported operator: {type(node.op).__name__}")
        _check_node(node.left, names)
        _check_node(node.right, names)
    elif isinstance(node, ast.UnaryOp):
        if not isinstance(node.op, (ast.USub, ast.UAdd)):
            raise CalculationError(f"Unsupported operator: {type(node.op).__name__}")
        _check_node(node.operand, names)
    elif isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise CalculationError(f"Unsupported literal: {node.value!r}")
        if isinstance(node.value, float) and not math.isfinite(node.value):
            raise CalculationError("Numeric literal is out of range")
    elif isinstance(node, ast.Name):
        names.add(node.id)
    elif isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id.upper() not in FUNCTIONS:
            raise CalculationError(f"Unsupported function in formula: {ast.unparse(node.func)}")
        if node.keywords:
            raise CalculationError("Keyword arguments are not supported in formulas")
        for arg in node.args:
            _check_node(arg, names)
    else:
        raise CalculationError(f"Unsupported expression: {type(node).__name__}")


@lru_cache(maxsize=512)
def parse_formula(source: str) -> Formula:
    """Parse and check a formula.

    Raises:
        CalculationError: If the formula is not valid syntax or uses anything
            outside the supported subset.
    """
    try:
        tree = ast.parse(source.strip(), mode="eval")
    except SyntaxError as exc:
        raise CalculationError(f"Invalid formula {source!r}: {exc.msg}") from exc
    names: set[str] = set()
    _check_node(tree, names)
    return Formula(source=source, tree=tree, names=frozenset(names))


def _evaluate(node: ast.AST, values: Mapping[str, Decimal]) -> Decimal:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body, values)
    if isinstance(node, ast.BinOp):
        left = _evaluate(node.left, values)
        right = _evaluate(node.right, values)
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp):
        operand = _evaluate(node.operand, values)
        return -operand if isinstance(node.op, ast.USub) else operand
    if isinstance(node, ast.Constant):
        return Decimal(str(node.value))
    if isinstance(node, ast.Name):
        if node.id not in values:
            raise CalculationError(f"Formula references unknown field '{node.id}'")
        return values[node.id]
    if isinstance(node, ast.Call):
        name = node.func.id.upper()  # type: ignore[attr-defined]
        func, minimum, maximum = FUNCTIONS[name]
        args = [_evaluate(arg, values) for arg in node.args]
        _require_args(name, args, minimum, maximum)
        return func(*args)
    raise CalculationError(f"Unsupported expression: {type(node).__name__}")


def evaluate_formula(source: str, values: Mapping[str, Decimal]) -> Decimal:
    """Evaluate a formula against dependency values.

    Args:
        source: Formula text.
        values: Decimal value for every field id the formula reads.

    Returns:
        The computed value.

    Raises:
        CalculationError: On invalid formulas, unknown names, arithmetic
            failures such as division by zero, and non-finite results.

    Example:
        >>> evaluate_formula("wages + interest", {"wages": Decimal("100"), "interest": Decimal("5")})
        Decimal('105')
    """
    formula = parse_formula(source)
    try:
        result = _evaluate(formula.tree, values)
    except ArithmeticError as exc:
        raise CalculationError(f"Arithmetic error in {source!r}: {exc.__class__.__name__}") from exc
    if not result.is_finite():
        raise CalculationError(f"Formula {source!r} did not produce a finite number")
    return result

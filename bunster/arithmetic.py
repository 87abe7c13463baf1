"""Integer helpers used by arithmetic expressions in compiled scripts."""

from __future__ import annotations

import math
import re

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _atoi(value: str) -> int:
    return int(value) if _INTEGER.fullmatch(value) else 0


def _parse_float(value: str) -> float | None:
    if not value or value != value.strip() or "_" in value:
        return None
    try:
        return float(value)
    except ValueError:
        pass
    lowered = value.lower()
    if "x" in lowered and "p" in lowered:
        try:
            return float.fromhex(value)
        except ValueError:
            return None
    return None


def parse_int(value: str) -> int:
    """Parse a number, truncating any fractional part; invalid input gives 0."""
    number = _parse_float(value)
    if number is None or not math.isfinite(number):
        return 0
    return int(number)


def format_int(value: int) -> str:
    """Format an integer in base 10."""
    return str(value)


def var_increment(shell, name: str, value: int, post: bool) -> int:
    """Add ``value`` to a variable; return the old value if ``post`` else the new one."""
    current = _atoi(shell.read_var(name))
    shell.set_var(name, format_int(current + value))
    return current if post else current + value


def negate_int(value: int) -> int:
    """Logical not: 1 for zero, 0 otherwise."""
    return int(value == 0)


def int_power(operand: int, power: int) -> int:
    """Raise ``operand`` to ``power``, truncating to an integer."""
    try:
        result = math.pow(float(operand), float(power))
    except (OverflowError, ValueError, ZeroDivisionError):
        return 0
    return int(result) if math.isfinite(result) else 0


_COMPARISONS = {
    "==": lambda x, y: x == y,
    "!=": lambda x, y: x != y,
    "<": lambda x, y: x < y,
    ">": lambda x, y: x > y,
    "<=": lambda x, y: x <= y,
    ">=": lambda x, y: x >= y,
    "&&": lambda x, y: x != 0 and y != 0,
    "||": lambda x, y: x != 0 or y != 0,
}


def compare_int(x: int, op: str, y: int) -> int:
    """Apply a comparison or logical operator, returning 1 for true and 0 otherwise."""
    check = _COMPARISONS.get(op)
    return 1 if check is not None and check(x, y) else 0


def conditional_int(a: int, b: int, c: int) -> int:
    """The ternary operator: ``b`` when ``a`` is non-zero, else ``c``."""
    return b if a != 0 else c
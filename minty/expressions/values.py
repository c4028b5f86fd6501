"""
Coercion rules for dynamically typed template values.

Template data is loosely typed: numbers may arrive as strings, missing
values as None. The helpers below define how the evaluator and the
built-in filters compare, add and print such values.

Coercion table:

    numeric     int/float (bool excluded) or a numeric string
    truthiness  Python bool()
    a == b      None or bool on either side  -> bool(a) == bool(b)
                both numeric                 -> numeric comparison
                number vs non-numeric string -> str(number) == string
                otherwise                    -> Python ==
    a < b       both numeric                 -> numeric comparison
                None or bool on either side  -> bool(a) < bool(b)
                both strings                 -> lexicographic
                otherwise                    -> compare string forms
"""

from __future__ import annotations

import math
import operator
import re
from typing import Any, Callable, Optional, Union

Number = Union[int, float]

_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")


class Undefined:
    """
    Value of a missing path on the left of ``is``.

    Falsy and without a string form; only ``defined``/``undefined`` tell
    it apart from None.
    """
    _instance: Optional[Undefined] = None

    def __new__(cls) -> Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined()


def is_numeric(value: Any) -> bool:
    """True for int/float (not bool) and numeric strings like "42" or "-1.5"."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value))
    return False


def to_number(value: Any) -> Number:
    """
    Convert a value to int or float.

    Integral text becomes int, other numeric text becomes float.
    Non-numeric values become 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        if _INTEGER_RE.match(value):
            return int(value)
        return float(value)
    return 0


def to_int(value: Any) -> int:
    """Integer conversion truncating toward zero; non-numeric -> 0."""
    number = to_number(value)
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            return 0
        return int(number)
    return number


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def format_number(value: Number) -> str:
    """Print numbers the way templates expect: 2.0 -> "2", 0.1 + 0.2 -> "0.3" (14 significant digits)."""
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return format(value, ".14g")
    return str(value)


def to_string(value: Any) -> str:
    """
    String form of a scalar value.

    True -> "1", False/None -> "", numbers via format_number.
    Lists, dicts and other objects have no string form and give "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return value
    return ""


def to_bool(value: Any) -> bool:
    return bool(value)


def loose_equals(left: Any, right: Any) -> bool:
    """Equality with loose typing (see module docstring)."""
    if left is None or right is None or isinstance(left, bool) or isinstance(right, bool):
        if left is None and right is None:
            return True
        return bool(left) == bool(right)
    if is_numeric(left) and is_numeric(right):
        return to_number(left) == to_number(right)
    if isinstance(left, (int, float)) and isinstance(right, str):
        return format_number(left) == right
    if isinstance(left, str) and isinstance(right, (int, float)):
        return left == format_number(right)
    return left == right


def _ordered(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(left: Any, right: Any) -> bool:
        if is_numeric(left) and is_numeric(right):
            return op(to_number(left), to_number(right))
        if left is None or right is None or isinstance(left, bool) or isinstance(right, bool):
            return op(bool(left), bool(right))
        if isinstance(left, str) and isinstance(right, str):
            return op(left, right)
        if is_scalar(left) and is_scalar(right):
            return op(to_string(left), to_string(right))
        try:
            return bool(op(left, right))
        except TypeError:
            return False
    return compare


less_than = _ordered(operator.lt)
greater_than = _ordered(operator.gt)
less_equal = _ordered(operator.le)
greater_equal = _ordered(operator.ge)


__all__ = [
    "Number",
    "Undefined",
    "UNDEFINED",
    "is_numeric",
    "to_number",
    "to_int",
    "is_scalar",
    "format_number",
    "to_string",
    "to_bool",
    "loose_equals",
    "less_than",
    "greater_than",
    "less_equal",
    "greater_equal",
]

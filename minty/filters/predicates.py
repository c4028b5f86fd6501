"""
Built-in tests for the ``is`` operator.

``{% if n is divisibleby(3) %}`` calls ``divisibleby(n, "3")``; ``is not``
negates the result. Missing paths arrive as ``UNDEFINED``: ``defined``
is true for any existing value, None included.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Dict

from ..expressions.values import UNDEFINED, is_numeric, to_int


def defined(value: Any) -> bool:
    return value is not UNDEFINED


def undefined(value: Any) -> bool:
    return value is UNDEFINED


def null(value: Any) -> bool:
    return value is None or value is UNDEFINED


def even(value: Any) -> bool:
    return is_numeric(value) and to_int(value) % 2 == 0


def odd(value: Any) -> bool:
    return is_numeric(value) and to_int(value) % 2 != 0


def number(value: Any) -> bool:
    return is_numeric(value)


def string(value: Any) -> bool:
    return isinstance(value, str)


def iterable(value: Any) -> bool:
    return isinstance(value, (str, Mapping, Iterable))


def divisibleby(value: Any, divisor: Any = None) -> bool:
    if not (is_numeric(value) and is_numeric(divisor)):
        return False
    divisor = to_int(divisor)
    return divisor != 0 and to_int(value) % divisor == 0


def get_builtin_tests() -> Dict[str, Callable[..., bool]]:
    """Fresh name -> test mapping of the built-in tests."""
    return {
        "defined": defined,
        "undefined": undefined,
        "null": null,
        "even": even,
        "odd": odd,
        "number": number,
        "string": string,
        "iterable": iterable,
        "divisibleby": divisibleby,
    }


__all__ = ["get_builtin_tests"]

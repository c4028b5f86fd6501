"""
Built-in filters.

Every filter is called as ``filter(value, *args)``. Numeric arguments
arrive as text (``truncate(10)`` passes "10") and are coerced here.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping, Sized
from decimal import (
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
    InvalidOperation,
)
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote_plus

from ..expressions.values import format_number, is_numeric, is_scalar, to_int, to_number, to_string
from ..markup import RawValue

_WORD_START = re.compile(r"(^|[ \t\r\n\f\v])([^ \t\r\n\f\v])")

_ROUNDING = {
    "common": ROUND_HALF_UP,
    "ceil": ROUND_CEILING,
    "floor": ROUND_FLOOR,
    "down": ROUND_DOWN,
    "tozero": ROUND_DOWN,
    "awayzero": ROUND_UP,
    "even": ROUND_HALF_EVEN,
    "banker": ROUND_HALF_EVEN,
}

_DECIMAL_UNITS = ["B", "kB", "MB", "GB", "TB"]
_BINARY_UNITS = ["B", "KiB", "MiB", "GiB", "TiB"]


def _flag(value: Any) -> bool:
    if isinstance(value, str) and is_numeric(value):
        return to_number(value) != 0
    return bool(value)


def _items(value: Any) -> Optional[List[Any]]:
    """Elements of a list-like value; mappings yield their values."""
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


# ---- output control ----

def raw(value: Any) -> RawValue:
    if isinstance(value, RawValue):
        return value
    if value is None or is_scalar(value):
        return RawValue(to_string(value))
    return RawValue("")


def debug(value: Any) -> RawValue:
    try:
        dumped = json.dumps(value, indent=4, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        dumped = ""
    return RawValue(f"<pre>{dumped}</pre>")


def identity(value: Any) -> Any:
    return value


# ---- strings ----

def lower(value: Any) -> str:
    return to_string(value).lower()


def upper(value: Any) -> str:
    return to_string(value).upper()


def capitalize(value: Any) -> str:
    """Upper-case the first character, leave the rest alone."""
    text = to_string(value)
    return text[:1].upper() + text[1:]


def title(value: Any) -> str:
    """Upper-case the first character of every whitespace-separated word."""
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), to_string(value))


def trim(value: Any) -> str:
    return to_string(value).strip()


def truncate(value: Any, length: Any = 255, end: Any = "...") -> str:
    """
    Shorten text to at most ``length`` characters including ``end``.

    A cut inside a word backs up to the previous space when there is one.
    """
    text = to_string(value)
    length = to_int(length)
    end = to_string(end)
    if len(text) <= length:
        return text

    keep = max(length - len(end), 0)
    cut = text[:keep]
    inside_word = cut and not cut[-1].isspace() and not text[keep].isspace()
    if inside_word and " " in cut:
        cut = cut[:cut.rfind(" ")]
    return cut.rstrip() + end


def replace(value: Any, old: Any, new: Any, count: Any = None) -> str:
    text = to_string(value)
    old = to_string(old)
    new = to_string(new)
    if count is None:
        return text.replace(old, new) if old else text
    if not old:
        return text
    return text.replace(old, new, max(to_int(count), 0))


def split(value: Any, separator: Any = "") -> List[str]:
    text = to_string(value)
    separator = to_string(separator)
    if separator == "":
        return list(text)
    return text.split(separator)


def urlencode(value: Any) -> str:
    return quote_plus(to_string(value))


def reverse(value: Any) -> Any:
    if isinstance(value, str):
        return value[::-1]
    if isinstance(value, Mapping):
        return dict(reversed(list(value.items())))
    if isinstance(value, (list, tuple)):
        return list(reversed(value))
    return value


# ---- numbers ----

def absolute(value: Any) -> Any:
    return abs(to_number(value))


def round_number(value: Any, precision: Any = 0, method: Any = "common") -> float:
    """
    Round to ``precision`` decimals.

    Methods: common (half away from zero), ceil, floor, down/tozero,
    awayzero, even/banker (half to even), odd (half to odd).
    """
    number = to_number(value)
    if isinstance(number, float) and not math.isfinite(number):
        return number
    precision = to_int(precision)
    method = to_string(method)

    try:
        scaled = Decimal(repr(number)).scaleb(precision)
        if method == "odd":
            rounded = _round_half_odd(scaled)
        else:
            rounded = scaled.to_integral_value(rounding=_ROUNDING.get(method, ROUND_HALF_UP))
        return float(rounded.scaleb(-precision))
    except InvalidOperation:
        return float(number)


def _round_half_odd(scaled: Decimal) -> Decimal:
    floor = scaled.to_integral_value(rounding=ROUND_FLOOR)
    if scaled - floor == Decimal("0.5"):
        return floor if floor % 2 != 0 else floor + 1
    return scaled.to_integral_value(rounding=ROUND_HALF_UP)


def sprintf(value: Any, format_string: Any) -> str:
    """printf-style formatting: ``{{ price|sprintf("%.2f") }}``."""
    if isinstance(value, str) and is_numeric(value):
        value = to_number(value)
    elif isinstance(value, bool):
        value = int(value)
    elif value is None:
        value = ""
    return to_string(format_string) % value


def filesizeformat(value: Any, binary: Any = False) -> str:
    size = to_number(value)
    binary = _flag(binary)
    units = _BINARY_UNITS if binary else _DECIMAL_UNITS
    base = 1024 if binary else 1000
    if size < base:
        return f"{format_number(size)} {units[0]}"
    exponent = min(int(math.log(size) / math.log(base)), len(units) - 1)
    return "%.1f %s" % (size / base ** exponent, units[exponent])


# ---- collections ----

def length(value: Any) -> int:
    if isinstance(value, str):
        return len(value)
    if isinstance(value, Sized):
        return len(value)
    return 0


def first(value: Any, count: Any = None) -> Any:
    items = _items(value)
    if items is None:
        return ""
    if count is None:
        return items[0] if items else ""
    return items[:max(to_int(count), 0)]


def last(value: Any, count: Any = None) -> Any:
    items = _items(value)
    if items is None:
        return ""
    if count is None:
        return items[-1] if items else ""
    count = max(to_int(count), 0)
    return items[-count:] if count else items


def join(value: Any, separator: Any = "", attribute: Any = None) -> str:
    items = _items(value)
    if items is None:
        return ""
    if attribute is not None:
        items = [_attribute(item, to_string(attribute)) for item in items]
    return to_string(separator).join(to_string(item) for item in items)


def total(value: Any, attribute: Any = None) -> Any:
    items = _items(value)
    if items is None:
        return 0
    if attribute is not None:
        items = [_attribute(item, to_string(attribute), 0) for item in items]
    return sum(to_number(item) if is_numeric(item) else 0 for item in items)


# ---- utility ----

def default(value: Any, fallback: Any = None, boolean: Any = False) -> Any:
    if _flag(boolean):
        return value if value else fallback
    return value if value is not None else fallback


def attr(value: Any, name: Any) -> Any:
    return _attribute(value, to_string(name))


def _attribute(item: Any, name: str, missing: Any = "") -> Any:
    if isinstance(item, Mapping):
        found = item.get(name)
    elif isinstance(item, (list, tuple, str)) or item is None:
        found = None
    else:
        found = getattr(item, name, None)
    return missing if found is None else found


def get_builtin_filters() -> Dict[str, Callable[..., Any]]:
    """Fresh name -> filter mapping of the built-in filters."""
    return {
        "raw": raw,
        "debug": debug,
        "d": identity,
        "lower": lower,
        "upper": upper,
        "capitalize": capitalize,
        "title": title,
        "trim": trim,
        "truncate": truncate,
        "replace": replace,
        "split": split,
        "urlencode": urlencode,
        "reverse": reverse,
        "abs": absolute,
        "round": round_number,
        "sprintf": sprintf,
        "filesizeformat": filesizeformat,
        "length": length,
        "count": length,
        "first": first,
        "last": last,
        "join": join,
        "sum": total,
        "default": default,
        "attr": attr,
    }


__all__ = ["get_builtin_filters"]

"""
Filter chain application.

A chain is the ``|``-separated tail of an interpolation:
``{{ name|trim|truncate(10, "...")|upper }}``. Each element names a filter
and optionally passes arguments, which are literals or paths into the
data context.
"""

from __future__ import annotations

import re
from typing import Any, Callable, List, Mapping, Sequence, Tuple

from ..errors import TemplateError
from ..expressions.values import is_numeric
from ..template.context import resolve_path, split_quoted

FilterFunc = Callable[..., Any]

_C_ESCAPE = re.compile(r"\\(x[0-9A-Fa-f]{1,2}|[0-7]{1,3}|.)", re.DOTALL)
_C_SIMPLE = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "v": "\v",
    "b": "\b",
    "f": "\f",
}

_KEYWORDS = {
    "true": True,
    "false": False,
    "null": None,
}


def unescape_c(text: str) -> str:
    """Resolve C-style backslash escapes (``\\n``, ``\\x41``, ``\\101``, ``\\"``)."""
    def replace(match: re.Match) -> str:
        sequence = match.group(1)
        if sequence[0] == "x" and len(sequence) > 1:
            return chr(int(sequence[1:], 16))
        if sequence[0] in "01234567":
            return chr(int(sequence, 8) & 0xFF)
        return _C_SIMPLE.get(sequence, sequence)

    return _C_ESCAPE.sub(replace, text)


def parse_argument(text: str, context: Mapping[str, Any]) -> Any:
    """
    Interpret one filter or test argument.

    - ``"text"``: string literal, C-style escapes resolved
    - numeric text: kept as text, the filter coerces it
    - ``true``/``false``/``null``: the corresponding value
    - anything else: a path resolved against the context
    """
    text = text.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return unescape_c(text[1:-1])
    if is_numeric(text):
        return text
    if text in _KEYWORDS:
        return _KEYWORDS[text]
    return resolve_path(text, context)


def parse_arguments(text: str, context: Mapping[str, Any]) -> List[Any]:
    """Split an argument list on unquoted commas and interpret each part."""
    if not text.strip():
        return []
    return [parse_argument(part, context) for part in split_quoted(",", text)]


def split_call(call: str) -> Tuple[str, str]:
    """Split ``name(args)`` into ("name", "args"); args are "" without parentheses."""
    call = call.strip()
    if call.endswith(")"):
        call = call[:-1]
    parts = split_quoted("(", call, 2)
    name = parts[0].strip()
    return name, parts[1] if len(parts) > 1 else ""


def apply_filters(
    value: Any,
    calls: Sequence[str],
    filters: Mapping[str, FilterFunc],
    context: Mapping[str, Any],
) -> Any:
    """
    Apply filter calls left to right.

    Args:
        value: Initial value
        calls: Filter call texts, e.g. ``["trim", "truncate(10)"]``
        filters: Filter registry
        context: Data context for path arguments

    Returns:
        The value produced by the last filter

    Raises:
        TemplateError: Unknown filter or unresolvable path argument
    """
    for call in calls:
        name, argument_text = split_call(call)
        function = filters.get(name)
        if function is None:
            raise TemplateError(f"filter `{name}` not found")
        arguments = parse_arguments(argument_text, context)
        value = function(value, *arguments)
    return value


__all__ = [
    "FilterFunc",
    "unescape_c",
    "parse_argument",
    "parse_arguments",
    "split_call",
    "apply_filters",
]

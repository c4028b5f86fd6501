"""
Data context access for rendering.

Provides the quote-aware splitter shared by path and filter parsing, dot
path resolution against nested mappings and sequences, and scoped context
extension for loop variables.
"""

from __future__ import annotations

from collections import ChainMap
from typing import Any, List, Mapping, MutableMapping, Sequence

from ..errors import TemplateError

_QUOTE = '"'
_ESCAPE = "\\"


def split_quoted(separator: str, text: str, limit: int = -1) -> List[str]:
    """
    Split text on a separator that is not inside double quotes.

    Quotes and escapes are kept in the parts. When splitting on ``|``,
    a doubled ``||`` is an operator and does not split.

    Args:
        separator: Separator string
        text: Text to split
        limit: Maximum number of parts (-1 for no limit); the last part
               keeps the unsplit remainder

    Returns:
        List of parts (at least one, possibly empty)
    """
    parts: List[str] = []
    current: List[str] = []
    quoted = False
    escaped = False
    position = 0
    length = len(text)
    width = len(separator)

    while position < length:
        char = text[position]
        if quoted:
            if escaped:
                escaped = False
            elif char == _QUOTE:
                quoted = False
            elif char == _ESCAPE:
                escaped = True
        elif char == _QUOTE:
            quoted = True
        elif text.startswith(separator, position):
            if separator == "|" and text.startswith("||", position):
                current.append("||")
                position += 2
                continue
            parts.append("".join(current))
            current = []
            position += width
            if limit > 0 and len(parts) == limit - 1:
                current = [text[position:]]
                break
            continue
        current.append(char)
        position += 1

    parts.append("".join(current))
    return parts


def resolve_path(path: str, context: Mapping[str, Any]) -> Any:
    """
    Resolve a dot path such as ``user.address.city`` or ``items.0``.

    Each segment must exist: a mapping key, or a non-negative integer
    index into a list or tuple.

    Raises:
        TemplateError: "path `<segment>` not found"
    """
    current: Any = context
    for segment in split_quoted(".", path):
        current = _lookup(current, segment)
    return current


def _lookup(value: Any, segment: str) -> Any:
    if isinstance(value, Mapping):
        if segment in value:
            return value[segment]
        if segment.isdigit() and int(segment) in value:
            return value[int(segment)]
    elif isinstance(value, (list, tuple)) and segment.isdigit():
        index = int(segment)
        if index < len(value):
            return value[index]
    raise TemplateError(f"path `{segment}` not found")


def extend_context(context: Mapping[str, Any], variables: Mapping[str, Any]) -> Mapping[str, Any]:
    """
    Layer variables over a context without modifying it.

    The returned mapping sees the new variables first and falls back to
    the original context for everything else.
    """
    overlay: MutableMapping[str, Any] = dict(variables)
    return ChainMap(overlay, context)  # type: ignore[arg-type]


def iterate_collection(value: Any) -> Sequence[tuple]:
    """
    Key/value pairs of a loopable value: mapping items or indexed sequence elements.

    Raises:
        TemplateError: For values that are neither a mapping nor a list/tuple
    """
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, (list, tuple)):
        return list(enumerate(value))
    raise TemplateError("expression must evaluate to an array")


__all__ = [
    "split_quoted",
    "resolve_path",
    "extend_context",
    "iterate_collection",
]

"""
Output escaping.

The renderer passes every piece of output through an escape function.
RawValue marks text that is already safe and must be emitted as is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

# Single quote becomes &#039;, not &#x27;
_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
})


@dataclass(frozen=True)
class RawValue:
    """Pre-escaped text that the escape function returns untouched."""
    value: str

    def __str__(self) -> str:
        return self.value


def escape_html(text: Union[str, RawValue]) -> str:
    """Escape ``& < > " '`` as HTML entities; RawValue passes through."""
    if isinstance(text, RawValue):
        return text.value
    return text.translate(_HTML_ESCAPES)


def escape_none(text: Union[str, RawValue]) -> str:
    """Escape function for plain-text output."""
    if isinstance(text, RawValue):
        return text.value
    return text


EscapeFunc = Callable[[Union[str, RawValue]], str]


__all__ = ["RawValue", "escape_html", "escape_none", "EscapeFunc"]

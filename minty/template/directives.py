"""
Classification of ``{% ... %}`` directive headers.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Dict, Optional


class DirectiveKind(enum.Enum):
    IF = "if"
    ELSEIF = "elseif"
    ELSE = "else"
    ENDIF = "endif"
    FOR = "for"
    ENDFOR = "endfor"
    BLOCK = "block"
    ENDBLOCK = "endblock"
    EXTENDS = "extends"
    INCLUDE = "include"
    VAR = "var"

    @property
    def closes_scope(self) -> bool:
        return self in _CLOSERS

    @property
    def opens_scope(self) -> bool:
        return self in _OPENERS


_CLOSERS = frozenset({
    DirectiveKind.ENDIF,
    DirectiveKind.ENDFOR,
    DirectiveKind.ENDBLOCK,
    DirectiveKind.ELSEIF,
    DirectiveKind.ELSE,
})

_OPENERS = frozenset({
    DirectiveKind.IF,
    DirectiveKind.ELSEIF,
    DirectiveKind.ELSE,
    DirectiveKind.FOR,
    DirectiveKind.BLOCK,
})

# Bare keywords: the directive text must be exactly the word
_BARE: Dict[str, DirectiveKind] = {
    "endif": DirectiveKind.ENDIF,
    "endfor": DirectiveKind.ENDFOR,
    "endblock": DirectiveKind.ENDBLOCK,
    "else": DirectiveKind.ELSE,
}

# Keywords with an argument: the word must be followed by whitespace
_WITH_ARGUMENT = re.compile(r"^(elseif|if|for|block|extends|include)\s+(.*)$", re.DOTALL)


@dataclass(frozen=True)
class Directive:
    kind: DirectiveKind
    expression: Optional[str]


def classify_directive(text: str) -> Directive:
    """
    Classify directive text (delimiters already removed, whitespace stripped).

    Anything that is not a known keyword form is a plain variable
    expression: ``{% name %}`` renders like ``{{ name }}``.
    """
    bare = _BARE.get(text)
    if bare is not None:
        return Directive(bare, None)

    match = _WITH_ARGUMENT.match(text)
    if match:
        return Directive(DirectiveKind(match.group(1)), match.group(2).strip())

    return Directive(DirectiveKind.VAR, text)


__all__ = ["DirectiveKind", "Directive", "classify_directive"]

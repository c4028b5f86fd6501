"""
Template token types.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Token classes produced by the template lexer."""
    TEXT = "TEXT"              # literal text between tags
    VARIABLE = "VARIABLE"      # {{ ... }}
    DIRECTIVE = "DIRECTIVE"    # {% ... %}


@dataclass(frozen=True)
class Token:
    """
    Token with position information for diagnostics.
    """
    type: TokenType
    value: str
    position: int        # Offset in the source text
    line: int            # 1-based line number
    column: int          # 1-based column number

    @property
    def is_text(self) -> bool:
        return self.type is TokenType.TEXT

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token"]

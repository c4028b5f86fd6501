"""
Lexical analyzer for templates.

Splits template source into literal text and tag tokens:
- ``{{ ... }}`` interpolations become VARIABLE tokens
- ``{% ... %}`` directives become DIRECTIVE tokens
- ``{# ... #}`` comments are dropped

The token list always alternates TEXT and tag tokens, starting and ending
with a (possibly empty) TEXT token.

Directives and comments that sit alone on a line are "standalone": the
indentation before them and the line break after them are removed, so that
control flow does not leave blank lines in the output.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

_CLOSERS = {
    "{{": "}}",
    "{%": "%}",
    "{#": "#}",
}


class TemplateLexer:
    """
    Template lexer.

    One instance tokenizes one source text.
    """

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Tokenize the whole source.

        Returns:
            Alternating TEXT / VARIABLE-or-DIRECTIVE tokens
        """
        text = self.text
        tokens: List[Token] = []
        literal = ""
        literal_start = 0
        tag_seen = False
        position = 0

        while position < self.length:
            brace = text.find("{", position)
            if brace == -1 or brace + 1 >= self.length:
                literal += text[position:]
                break

            literal += text[position:brace]
            opener = text[brace:brace + 2]
            if opener not in _CLOSERS:
                literal += "{"
                position = brace + 1
                continue

            if opener == "{{":
                body, position = self._read_tag(brace + 2, "}}")
                tokens.append(self._make(TokenType.TEXT, literal, literal_start))
                tokens.append(self._make(TokenType.VARIABLE, body.strip(), brace))
                literal = ""
                literal_start = position
                tag_seen = True
                continue

            literal, standalone = self._strip_standalone(literal, at_start=not tag_seen)

            if opener == "{#":
                end = text.find("#}", brace + 2)
                position = self.length if end == -1 else end + 2
            else:
                body, position = self._read_tag(brace + 2, "%}")
                tokens.append(self._make(TokenType.TEXT, literal, literal_start))
                tokens.append(self._make(TokenType.DIRECTIVE, body.strip(), brace))
                literal = ""

            if standalone:
                position = self._skip_line_break(position)
            if opener == "{%":
                literal_start = position
            tag_seen = True

        tokens.append(self._make(TokenType.TEXT, literal, literal_start))
        return tokens

    def _read_tag(self, start: int, closer: str) -> Tuple[str, int]:
        """
        Read a tag body up to its closer.

        Inside double quotes the closer is not recognized; a backslash
        escapes the next character. Both are kept in the body.
        Without a closer the rest of the source is the body.
        """
        text = self.text
        quoted = False
        escaped = False
        position = start
        while position < self.length:
            char = text[position]
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                quoted = not quoted
            elif not quoted and text.startswith(closer, position):
                return text[start:position], position + len(closer)
            position += 1
        logger.debug("Unterminated tag at offset %d", start - 2)
        return text[start:], self.length

    @staticmethod
    def _strip_standalone(literal: str, at_start: bool) -> Tuple[str, bool]:
        """Drop trailing indentation when the upcoming tag is alone on its line."""
        newline = literal.rfind("\n")
        if newline == -1:
            if literal == "" or (at_start and literal.strip() == ""):
                return "", True
            return literal, False
        if literal[newline + 1:].strip() == "":
            return literal[:newline + 1], True
        return literal, False

    def _skip_line_break(self, position: int) -> int:
        if self.text.startswith("\n", position):
            return position + 1
        if self.text.startswith("\r\n", position):
            return position + 2
        return position

    def _make(self, token_type: TokenType, value: str, position: int) -> Token:
        line, column = self._location(position)
        return Token(token_type, value, position, line, column)

    def _location(self, position: int) -> Tuple[int, int]:
        position = min(position, self.length)
        line = self.text.count("\n", 0, position) + 1
        line_start = self.text.rfind("\n", 0, position) + 1
        return line, position - line_start + 1


def tokenize(text: str) -> List[Token]:
    """Convenience function: tokenize a template source."""
    return TemplateLexer(text).tokenize()


__all__ = ["TemplateLexer", "tokenize"]

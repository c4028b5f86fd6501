"""
Lexer for template expressions.

Splits an expression such as ``a + b * 2 > limit and user.name is defined``
into classified tokens:
- operators (symbolic ``&& || == != <= >= < > + - * / %`` and word
  operators ``and or not is``)
- parentheses
- numbers and double-quoted strings
- identifiers (dot paths, optionally with a call suffix: ``divisibleby(3)``)

Whitespace, including newlines, is ignored. Unknown characters are skipped.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from .tokens import ExpressionToken, OPERATORS

_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(r"[A-Za-z]+")
_NUMBER = re.compile(r"(?:\d|\.(?=\d))[\d.]*")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")

_IDENTIFIER_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_.")

_SYMBOLS_TWO = tuple(op for op in OPERATORS if len(op) == 2 and not op.isalpha())
_SYMBOLS_ONE = tuple(op for op in OPERATORS if len(op) == 1)


class ExpressionLexer:
    """
    Tokenizer for the expression language.

    The lexer is stateless between calls; one instance may be reused.
    """

    def tokenize(self, text: str) -> List[ExpressionToken]:
        """
        Split an expression into tokens.

        Args:
            text: Expression source (already stripped of its template delimiters)

        Returns:
            Tokens in source order
        """
        tokens: List[ExpressionToken] = []
        text = text.strip()
        position = 0
        length = len(text)

        while position < length:
            char = text[position]

            match = _WHITESPACE.match(text, position)
            if match:
                position = match.end()
                continue

            if char in "()":
                tokens.append(ExpressionToken.parenthesis(char))
                position += 1
                continue

            # Word operators only match a complete word
            match = _WORD.match(text, position)
            if match:
                word = match.group(0)
                end = match.end()
                if word in OPERATORS and (end >= length or text[end] not in _IDENTIFIER_CHARS):
                    tokens.append(ExpressionToken.operator(word))
                    position = end
                    continue

            two = text[position:position + 2]
            if two in _SYMBOLS_TWO:
                tokens.append(ExpressionToken.operator(two))
                position += 2
                continue

            if char in _SYMBOLS_ONE:
                tokens.append(ExpressionToken.operator(char))
                position += 1
                continue

            match = _NUMBER.match(text, position)
            if match:
                tokens.append(ExpressionToken.number(match.group(0)))
                position = match.end()
                continue

            if char == '"':
                value, position = self._read_string(text, position + 1)
                tokens.append(ExpressionToken.string(value))
                continue

            match = _IDENTIFIER.match(text, position)
            if match:
                value, position = self._read_identifier(text, match)
                tokens.append(ExpressionToken.identifier(value))
                continue

            position += 1

        return tokens

    @staticmethod
    def _read_string(text: str, position: int) -> Tuple[str, int]:
        """Read a double-quoted string body; a backslash keeps the next char literally."""
        chars: List[str] = []
        escaped = False
        length = len(text)
        while position < length:
            char = text[position]
            position += 1
            if escaped:
                chars.append(char)
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                break
            else:
                chars.append(char)
        return "".join(chars), position

    @staticmethod
    def _read_identifier(text: str, match: re.Match) -> Tuple[str, int]:
        """
        Read an identifier and an optional balanced call suffix.

        ``divisibleby (3)`` becomes ``divisibleby(3)``: whitespace before the
        opening parenthesis is dropped, the parenthesized text is kept as is.
        """
        value = match.group(0)
        position = match.end()
        length = len(text)

        lookahead = position
        while lookahead < length and text[lookahead].isspace():
            lookahead += 1
        if lookahead >= length or text[lookahead] != "(":
            return value, position

        depth = 0
        start = lookahead
        while lookahead < length:
            char = text[lookahead]
            lookahead += 1
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    break
        return value + text[start:lookahead], lookahead


def tokenize_expression(text: str) -> List[ExpressionToken]:
    """Convenience wrapper around ExpressionLexer."""
    return ExpressionLexer().tokenize(text)


__all__ = ["ExpressionLexer", "tokenize_expression"]

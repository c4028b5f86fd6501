"""
Tests for the expression lexer.
"""

import pytest

from minty.expressions import ExpressionLexer, tokenize_expression
from minty.expressions.tokens import ExpressionToken, ExpressionTokenType


def _types(tokens):
    return [t.type for t in tokens]


def _values(tokens):
    return [t.value for t in tokens]


class TestExpressionLexer:

    def setup_method(self):
        self.lexer = ExpressionLexer()

    def test_empty_expression(self):
        """An empty or blank expression has no tokens."""
        assert self.lexer.tokenize("") == []
        assert self.lexer.tokenize("   \n ") == []

    def test_arithmetic(self):
        """Operands and symbolic operators in source order."""
        tokens = self.lexer.tokenize("a + 2 * b")
        assert _values(tokens) == ["a", "+", "2", "*", "b"]
        assert _types(tokens) == [
            ExpressionTokenType.IDENTIFIER,
            ExpressionTokenType.OPERATOR,
            ExpressionTokenType.NUMBER,
            ExpressionTokenType.OPERATOR,
            ExpressionTokenType.IDENTIFIER,
        ]

    def test_no_spaces(self):
        """Two-character operators win over one-character ones."""
        assert _values(self.lexer.tokenize("a<=10&&b!=c||d>=1")) == [
            "a", "<=", "10", "&&", "b", "!=", "c", "||", "d", ">=", "1",
        ]

    def test_word_operators(self):
        """and/or/not/is are operators only as whole words."""
        tokens = self.lexer.tokenize("not android and island or ordinal is defined")
        assert _values(tokens) == [
            "not", "android", "and", "island", "or", "ordinal", "is", "defined",
        ]
        assert tokens[1].type is ExpressionTokenType.IDENTIFIER
        assert tokens[2].type is ExpressionTokenType.OPERATOR

    def test_dot_paths(self):
        """Dots belong to identifiers."""
        assert _values(self.lexer.tokenize('user.address.city == "x"')) == [
            "user.address.city", "==", "x",
        ]
        tokens = self.lexer.tokenize("items.0.name")
        assert tokens == [ExpressionToken.identifier("items.0.name")]

    def test_numbers(self):
        """Integers and decimals are NUMBER tokens."""
        tokens = self.lexer.tokenize("12 3.5 .25")
        assert _values(tokens) == ["12", "3.5", ".25"]
        assert all(t.type is ExpressionTokenType.NUMBER for t in tokens)

    def test_strings(self):
        """Double-quoted strings are unescaped; a backslash keeps the next char."""
        tokens = self.lexer.tokenize(r'"say \"hi\"" + "a\\b"')
        assert tokens[0] == ExpressionToken.string('say "hi"')
        assert tokens[2] == ExpressionToken.string("a\\b")

    def test_string_with_newline(self):
        """Newlines inside strings are kept."""
        tokens = self.lexer.tokenize('first\n+\n"\n"\n+\nsecond')
        assert _values(tokens) == ["first", "+", "\n", "+", "second"]

    def test_parentheses(self):
        """Parentheses are separate tokens."""
        tokens = self.lexer.tokenize("(a+b)*c")
        assert _values(tokens) == ["(", "a", "+", "b", ")", "*", "c"]
        assert tokens[0].is_parenthesis("(")
        assert tokens[4].is_parenthesis(")")

    def test_call_suffix(self):
        """A test call keeps its balanced argument list, without the space before it."""
        tokens = self.lexer.tokenize("n is divisibleby (3)")
        assert _values(tokens) == ["n", "is", "divisibleby(3)"]

    def test_nested_call_suffix(self):
        """Nested parentheses stay inside the identifier."""
        tokens = self.lexer.tokenize("x is between((1), 5) and y")
        assert _values(tokens) == ["x", "is", "between((1), 5)", "and", "y"]

    @pytest.mark.parametrize("text", ["a\r\n+\r\nb", "a  \n  +  \n  b", "a\t+\tb"])
    def test_whitespace_variants(self, text):
        """Any whitespace separates tokens."""
        assert _values(tokenize_expression(text)) == ["a", "+", "b"]

    def test_unknown_characters_skipped(self):
        """Characters that start no token are ignored."""
        assert _values(self.lexer.tokenize("a @ b")) == ["a", "b"]

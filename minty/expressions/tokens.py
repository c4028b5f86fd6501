"""
Expression tokens.

Value objects produced by the expression lexer and consumed by the
shunting-yard parser and the RPN evaluator.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict


class ExpressionTokenType(enum.Enum):
    """Token classes of the expression language."""
    NUMBER = "number"
    STRING = "string"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    PARENTHESIS = "parenthesis"


class Associativity(enum.Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class OperatorSpec:
    precedence: int
    associativity: Associativity = Associativity.LEFT
    unary: bool = False


# Lower precedence binds looser
OPERATORS: Dict[str, OperatorSpec] = {
    "or": OperatorSpec(1),
    "||": OperatorSpec(1),
    "and": OperatorSpec(2),
    "&&": OperatorSpec(2),
    "==": OperatorSpec(3),
    "!=": OperatorSpec(3),
    "is": OperatorSpec(3),
    "<": OperatorSpec(4),
    ">": OperatorSpec(4),
    "<=": OperatorSpec(4),
    ">=": OperatorSpec(4),
    "+": OperatorSpec(5),
    "-": OperatorSpec(5),
    "*": OperatorSpec(6),
    "/": OperatorSpec(6),
    "%": OperatorSpec(6),
    "not": OperatorSpec(7, Associativity.RIGHT, unary=True),
}


@dataclass(frozen=True)
class ExpressionToken:
    """
    A classified lexeme.

    Attributes:
        type: Token class
        value: Raw text; for strings the unescaped content,
               for identifiers the path (possibly with a "(...)" suffix)
    """
    type: ExpressionTokenType
    value: str

    @classmethod
    def number(cls, value: str) -> ExpressionToken:
        return cls(ExpressionTokenType.NUMBER, value)

    @classmethod
    def string(cls, value: str) -> ExpressionToken:
        return cls(ExpressionTokenType.STRING, value)

    @classmethod
    def identifier(cls, value: str) -> ExpressionToken:
        return cls(ExpressionTokenType.IDENTIFIER, value)

    @classmethod
    def operator(cls, value: str) -> ExpressionToken:
        return cls(ExpressionTokenType.OPERATOR, value)

    @classmethod
    def parenthesis(cls, value: str) -> ExpressionToken:
        return cls(ExpressionTokenType.PARENTHESIS, value)

    def is_operand(self) -> bool:
        return self.type in (
            ExpressionTokenType.NUMBER,
            ExpressionTokenType.STRING,
            ExpressionTokenType.IDENTIFIER,
        )

    def is_operator(self, value: str | None = None) -> bool:
        if self.type is not ExpressionTokenType.OPERATOR:
            return False
        return value is None or self.value == value

    def is_parenthesis(self, value: str | None = None) -> bool:
        if self.type is not ExpressionTokenType.PARENTHESIS:
            return False
        return value is None or self.value == value

    def __repr__(self) -> str:
        return f"ExpressionToken({self.type.name}, {self.value!r})"


__all__ = [
    "ExpressionTokenType",
    "Associativity",
    "OperatorSpec",
    "OPERATORS",
    "ExpressionToken",
]

"""
Shunting-yard conversion of expression tokens to Reverse Polish Notation.

Precedence and associativity come from the OPERATORS table. A closing
parenthesis pops operators until the matching opening one; unmatched
parentheses are ignored.
"""

from __future__ import annotations

from typing import List

from .tokens import Associativity, ExpressionToken, OPERATORS


class ExpressionParser:
    """Converts an infix token list to RPN order."""

    def to_rpn(self, tokens: List[ExpressionToken]) -> List[ExpressionToken]:
        """
        Reorder tokens into Reverse Polish Notation.

        Args:
            tokens: Infix tokens from ExpressionLexer

        Returns:
            Operands and operators in evaluation order (no parentheses)
        """
        output: List[ExpressionToken] = []
        operators: List[ExpressionToken] = []

        for token in tokens:
            if token.is_operand():
                output.append(token)
            elif token.is_parenthesis("("):
                operators.append(token)
            elif token.is_parenthesis(")"):
                while operators and not operators[-1].is_parenthesis("("):
                    output.append(operators.pop())
                if operators:
                    operators.pop()
            elif token.is_operator():
                self._push_operator(token, operators, output)

        while operators:
            token = operators.pop()
            if not token.is_parenthesis():
                output.append(token)

        return output

    @staticmethod
    def _push_operator(
        token: ExpressionToken,
        operators: List[ExpressionToken],
        output: List[ExpressionToken],
    ) -> None:
        spec = OPERATORS[token.value]
        while operators and operators[-1].is_operator():
            top = OPERATORS[operators[-1].value]
            if spec.associativity is Associativity.LEFT:
                should_pop = spec.precedence <= top.precedence
            else:
                should_pop = spec.precedence < top.precedence
            if not should_pop:
                break
            output.append(operators.pop())
        operators.append(token)


__all__ = ["ExpressionParser"]

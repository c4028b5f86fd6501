"""
Stack evaluator for template expressions.

Expressions are tokenized, converted to RPN and evaluated against a data
context. Path lookup and argument parsing are supplied by the caller, so
the evaluator knows nothing about the template data model.

The ``is`` operator dispatches to a test registry. An identifier that
feeds ``is`` as its right operand is not resolved but kept as a test name;
the left operand of ``is`` resolves missing paths to ``UNDEFINED``, so that
``x is defined`` tells absent data apart from a None value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ..errors import ExpressionError
from . import values
from .lexer import ExpressionLexer
from .parser import ExpressionParser
from .tokens import ExpressionToken, ExpressionTokenType

PathResolver = Callable[[str, Mapping[str, Any]], Any]
ArgumentParser = Callable[[str, Mapping[str, Any]], List[Any]]
TestFunc = Callable[..., bool]

_NUMBER_PREFIX = re.compile(r"\d*\.?\d*")


@dataclass(frozen=True)
class TestName:
    """Marker for an identifier in test-name position of ``is``."""
    __test__ = False

    name: str
    negated: bool = False

    def split_call(self) -> Tuple[str, str]:
        """Split ``divisibleby(3)`` into ("divisibleby", "3")."""
        name, paren, rest = self.name.partition("(")
        if not paren:
            return name.strip(), ""
        if rest.endswith(")"):
            rest = rest[:-1]
        return name.strip(), rest


@lru_cache(maxsize=512)
def compile_expression(text: str) -> Tuple[ExpressionToken, ...]:
    """Tokenize and reorder an expression; results are cached by text."""
    tokens = ExpressionLexer().tokenize(text)
    return tuple(ExpressionParser().to_rpn(tokens))


def _parse_number_literal(text: str) -> values.Number:
    # "1.2.3" keeps its numeric prefix
    prefix = _NUMBER_PREFIX.match(text).group(0)
    if "." in text:
        try:
            return float(prefix.rstrip(".") or 0)
        except ValueError:
            return 0.0
    return int(prefix or 0)


def _plain_arguments(text: str, context: Mapping[str, Any]) -> List[Any]:
    return [part.strip() for part in text.split(",") if part.strip()]


class ExpressionEvaluator:
    """
    Evaluates expression text against a data context.

    Args:
        resolve: Path resolver, raises on missing segments
        tests: Registry of ``is`` tests, ``name -> callable(value, *args)``
        parse_arguments: Parser for the argument text of ``name(...)`` tests
    """

    def __init__(
        self,
        resolve: PathResolver,
        tests: Mapping[str, TestFunc],
        parse_arguments: Optional[ArgumentParser] = None,
    ):
        self.resolve = resolve
        self.tests = tests
        self.parse_arguments = parse_arguments or _plain_arguments

    def evaluate(self, text: str, context: Mapping[str, Any]) -> Any:
        """
        Evaluate an expression.

        Raises:
            ExpressionError: Operand/operator errors and unknown tests
            TemplateError: Path resolution failures outside ``is``
        """
        rpn = compile_expression(text)
        stack: List[Any] = []

        for index, token in enumerate(rpn):
            if token.is_operand():
                stack.append(self._operand(rpn, index, token, context))
            elif token.is_operator("not"):
                if not stack:
                    raise ExpressionError("not enough operands for 'not'")
                operand = stack.pop()
                if isinstance(operand, TestName) and _feeds_is(rpn, index + 1):
                    stack.append(replace(operand, negated=not operand.negated))
                else:
                    stack.append(not operand)
            elif token.is_operator():
                if len(stack) < 2:
                    raise ExpressionError(f"not enough operands for '{token.value}'")
                right = stack.pop()
                left = stack.pop()
                if token.value == "is":
                    stack.append(self._apply_test(left, right, context))
                else:
                    stack.append(self._binary(token.value, left, right))

        if len(stack) != 1:
            raise ExpressionError("malformed expression")
        result = stack.pop()
        if isinstance(result, TestName):
            return None
        return result

    def _operand(
        self,
        rpn: Tuple[ExpressionToken, ...],
        index: int,
        token: ExpressionToken,
        context: Mapping[str, Any],
    ) -> Any:
        if token.type is ExpressionTokenType.NUMBER:
            return _parse_number_literal(token.value)
        if token.type is ExpressionTokenType.STRING:
            return token.value

        if _feeds_is(rpn, index + 1):
            return TestName(token.value)

        # Left operand of "is": the test name follows, possibly after "not"
        following = index + 1
        while following < len(rpn) and rpn[following].is_operator("not"):
            following += 1
        if following < len(rpn) and rpn[following].is_operand() and _feeds_is(rpn, following + 1):
            try:
                return self.resolve(token.value, context)
            except Exception:
                return values.UNDEFINED

        return self.resolve(token.value, context)

    def _apply_test(self, value: Any, spec: Any, context: Mapping[str, Any]) -> bool:
        if not isinstance(spec, TestName):
            spec = TestName(values.to_string(spec))
        name, argument_text = spec.split_call()

        test = self.tests.get(name)
        if test is None:
            raise ExpressionError(f"unknown test: {name}")

        args = self.parse_arguments(argument_text, context) if argument_text.strip() else []
        result = bool(test(value, *args))
        return not result if spec.negated else result

    @staticmethod
    def _binary(op: str, left: Any, right: Any) -> Any:
        if op in ("or", "||"):
            return bool(left) or bool(right)
        if op in ("and", "&&"):
            return bool(left) and bool(right)
        if op == "==":
            return values.loose_equals(left, right)
        if op == "!=":
            return not values.loose_equals(left, right)
        if op == "<":
            return values.less_than(left, right)
        if op == ">":
            return values.greater_than(left, right)
        if op == "<=":
            return values.less_equal(left, right)
        if op == ">=":
            return values.greater_equal(left, right)
        if op == "+":
            if values.is_numeric(left) and values.is_numeric(right):
                return values.to_number(left) + values.to_number(right)
            return values.to_string(left) + values.to_string(right)
        if op == "-":
            return _numeric_operand(left) - _numeric_operand(right)
        if op == "*":
            return _numeric_operand(left) * _numeric_operand(right)
        if op == "/":
            return _divide(left, right)
        if op == "%":
            return _modulo(left, right)
        raise ExpressionError(f"unknown operator: {op}")


def _feeds_is(rpn: Tuple[ExpressionToken, ...], index: int) -> bool:
    """True when the tokens from index on are zero or more ``not`` and then ``is``."""
    while index < len(rpn) and rpn[index].is_operator("not"):
        index += 1
    return index < len(rpn) and rpn[index].is_operator("is")


def _numeric_operand(value: Any) -> values.Number:
    return values.to_number(value) if values.is_numeric(value) else 0


def _divide(left: Any, right: Any) -> values.Number:
    if not values.is_numeric(right) or values.to_number(right) == 0:
        raise ExpressionError("division by zero")
    dividend = _numeric_operand(left)
    divisor = values.to_number(right)
    if isinstance(dividend, int) and isinstance(divisor, int) and dividend % divisor == 0:
        return dividend // divisor
    return dividend / divisor


def _modulo(left: Any, right: Any) -> int:
    divisor = values.to_int(right) if values.is_numeric(right) else 0
    if divisor == 0:
        raise ExpressionError("modulo by zero")
    dividend = values.to_int(_numeric_operand(left))
    remainder = abs(dividend) % abs(divisor)
    return -remainder if dividend < 0 else remainder


def evaluate_expression(
    text: str,
    context: Mapping[str, Any],
    resolve: PathResolver,
    tests: Mapping[str, TestFunc],
) -> Any:
    """Convenience function: evaluate one expression without keeping an evaluator."""
    return ExpressionEvaluator(resolve, tests).evaluate(text, context)


__all__ = [
    "TestName",
    "ExpressionEvaluator",
    "compile_expression",
    "evaluate_expression",
]

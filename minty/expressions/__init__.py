"""
Expression sub-language used by ``{{ }}``, ``if``/``elseif`` and ``is`` tests.
"""

from __future__ import annotations

from .evaluator import ExpressionEvaluator, TestName, compile_expression, evaluate_expression
from .lexer import ExpressionLexer, tokenize_expression
from .parser import ExpressionParser

__all__ = [
    "ExpressionEvaluator",
    "ExpressionLexer",
    "ExpressionParser",
    "TestName",
    "compile_expression",
    "evaluate_expression",
    "tokenize_expression",
]

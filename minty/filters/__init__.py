"""
Filters and ``is`` tests: registries of built-ins and the chain applier.
"""

from __future__ import annotations

from .builtins import get_builtin_filters
from .chain import apply_filters, parse_arguments
from .predicates import get_builtin_tests

__all__ = [
    "get_builtin_filters",
    "get_builtin_tests",
    "apply_filters",
    "parse_arguments",
]

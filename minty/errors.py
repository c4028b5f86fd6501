"""
Base exceptions for template errors.

All errors caused by template source, template data or engine
configuration inherit from TemplateError. While rendering, these errors
never reach the caller: the renderer turns them into inline diagnostics.

Programming errors in the engine itself should NOT inherit from
TemplateError.
"""

from __future__ import annotations


class TemplateError(Exception):
    """
    Base class for all template errors.

    The message is user-facing: it is embedded verbatim into the inline
    diagnostic, e.g. ``{{a / 0!!division by zero}}``.
    """
    pass


class ExpressionError(TemplateError):
    """Error while tokenizing or evaluating an expression."""
    pass


class ConfigError(TemplateError):
    """Invalid engine configuration."""
    pass


__all__ = ["TemplateError", "ExpressionError", "ConfigError"]

"""
minty: a small text template engine.

    >>> from minty import Template
    >>> Template().render("Hello {{ name|upper }}!", {"name": "world"})
    'Hello WORLD!'
"""

from __future__ import annotations

from .config import EngineConfig, load_config
from .errors import ConfigError, ExpressionError, TemplateError
from .markup import RawValue, escape_html, escape_none
from .template.loaders import DictLoader, FileSystemLoader
from .template.processor import Template
from .version import tool_version

__version__ = tool_version()

__all__ = [
    "Template",
    "RawValue",
    "escape_html",
    "escape_none",
    "DictLoader",
    "FileSystemLoader",
    "EngineConfig",
    "load_config",
    "TemplateError",
    "ExpressionError",
    "ConfigError",
    "__version__",
]

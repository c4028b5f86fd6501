"""
Template parsing: lexer, syntax tree, data context access and loaders.

The engine itself lives in ``minty.template.processor`` and is exported
from the top-level package as ``minty.Template``.
"""

from __future__ import annotations

from .context import extend_context, resolve_path, split_quoted
from .lexer import TemplateLexer, tokenize
from .loaders import DictLoader, FileSystemLoader, TemplateLoader
from .nodes import NodeKind, RootNode, TemplateNode
from .parser import TemplateParser, parse_template

__all__ = [
    "TemplateLexer",
    "TemplateParser",
    "TemplateNode",
    "RootNode",
    "NodeKind",
    "tokenize",
    "parse_template",
    "resolve_path",
    "split_quoted",
    "extend_context",
    "DictLoader",
    "FileSystemLoader",
    "TemplateLoader",
]

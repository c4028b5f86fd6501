"""
Template syntax tree nodes.

Nodes are immutable once the tree is built; render-time state lives in the
renderer. Every node carries its directive expression (if any) and its
children. End markers (endif, endfor, endblock) close scopes during parsing
and never become nodes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Type


class NodeKind(enum.Enum):
    ROOT = "root"
    LITERAL = "lit"
    VARIABLE = "var"
    IF = "if"
    ELSEIF = "elseif"
    ELSE = "else"
    FOR = "for"
    BLOCK = "block"
    EXTENDS = "extends"
    INCLUDE = "include"


@dataclass(frozen=True)
class TemplateNode:
    """Base class for all syntax tree nodes."""
    kind: ClassVar[NodeKind]

    expression: Optional[str] = None
    children: List[TemplateNode] = field(default_factory=list)


@dataclass(frozen=True)
class RootNode(TemplateNode):
    """Top of a parsed template."""
    kind: ClassVar[NodeKind] = NodeKind.ROOT


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """Literal text, emitted verbatim."""
    kind: ClassVar[NodeKind] = NodeKind.LITERAL

    @property
    def text(self) -> str:
        return self.expression or ""


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """``{{ expr|filters }}`` or an unrecognized ``{% ... %}`` directive."""
    kind: ClassVar[NodeKind] = NodeKind.VARIABLE


@dataclass(frozen=True)
class IfNode(TemplateNode):
    kind: ClassVar[NodeKind] = NodeKind.IF


@dataclass(frozen=True)
class ElseIfNode(TemplateNode):
    kind: ClassVar[NodeKind] = NodeKind.ELSEIF


@dataclass(frozen=True)
class ElseNode(TemplateNode):
    kind: ClassVar[NodeKind] = NodeKind.ELSE


@dataclass(frozen=True)
class ForNode(TemplateNode):
    """``{% for item in path %}`` or ``{% for key, item in path %}``."""
    kind: ClassVar[NodeKind] = NodeKind.FOR


@dataclass(frozen=True)
class BlockNode(TemplateNode):
    """Named, overridable region used by template inheritance."""
    kind: ClassVar[NodeKind] = NodeKind.BLOCK

    @property
    def name(self) -> str:
        return (self.expression or "").strip()


@dataclass(frozen=True)
class ExtendsNode(TemplateNode):
    kind: ClassVar[NodeKind] = NodeKind.EXTENDS


@dataclass(frozen=True)
class IncludeNode(TemplateNode):
    kind: ClassVar[NodeKind] = NodeKind.INCLUDE


NODE_TYPES: Dict[NodeKind, Type[TemplateNode]] = {
    node_type.kind: node_type
    for node_type in (
        RootNode, TextNode, VariableNode, IfNode, ElseIfNode, ElseNode,
        ForNode, BlockNode, ExtendsNode, IncludeNode,
    )
}


__all__ = [
    "NodeKind",
    "TemplateNode",
    "RootNode",
    "TextNode",
    "VariableNode",
    "IfNode",
    "ElseIfNode",
    "ElseNode",
    "ForNode",
    "BlockNode",
    "ExtendsNode",
    "IncludeNode",
    "NODE_TYPES",
]

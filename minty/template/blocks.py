"""
Template composition: ``extends``, ``block`` and ``include``.

A template whose first non-blank node is ``{% extends "base" %}`` renders
its parent instead of itself; its top-level blocks replace the parent's
blocks of the same name. Chains of any length resolve bottom-up, with the
most derived template winning. ``{% include "name" %}`` renders another
template in place with the current data.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from .nodes import BlockNode, ExtendsNode, IncludeNode, NodeKind, RootNode, TemplateNode

if TYPE_CHECKING:
    from .processor import TemplateRenderer

logger = logging.getLogger(__name__)

BlockOverrides = Mapping[str, BlockNode]


def find_extends(root: TemplateNode) -> Optional[ExtendsNode]:
    """Return the extends node if it is the first non-blank child of root."""
    for child in root.children:
        if isinstance(child, ExtendsNode):
            return child
        if child.kind is NodeKind.LITERAL and not (child.expression or "").strip():
            continue
        return None
    return None


def collect_blocks(root: TemplateNode) -> Dict[str, BlockNode]:
    """Top-level blocks of a template by name; a later duplicate wins."""
    return {
        child.name: child
        for child in root.children
        if isinstance(child, BlockNode)
    }


def template_name(expression: Optional[str]) -> str:
    """Strip one pair of matching single or double quotes."""
    name = (expression or "").strip()
    if len(name) >= 2 and name[0] == name[-1] and name[0] in "\"'":
        return name[1:-1]
    return name


def render_extends(
    renderer: TemplateRenderer,
    node: ExtendsNode,
    root: RootNode,
    context: Mapping[str, Any],
    overrides: BlockOverrides,
) -> str:
    """Render the parent of ``root`` with the merged block overrides."""
    merged: Dict[str, BlockNode] = collect_blocks(root)
    merged.update(overrides)
    return _render_loaded(renderer, "extends", node, context, merged)


def render_include(
    renderer: TemplateRenderer,
    node: IncludeNode,
    context: Mapping[str, Any],
) -> str:
    return _render_loaded(renderer, "include", node, context, {})


def render_block(
    renderer: TemplateRenderer,
    node: BlockNode,
    context: Mapping[str, Any],
    overrides: BlockOverrides,
) -> str:
    """
    Render a block: the override when one exists, otherwise the block's
    own content with the overrides still available to nested blocks.
    """
    override = overrides.get(node.name)
    if override is not None:
        return renderer.render_children(override, context, {})
    return renderer.render_children(node, context, overrides)


def _render_loaded(
    renderer: TemplateRenderer,
    keyword: str,
    node: TemplateNode,
    context: Mapping[str, Any],
    overrides: BlockOverrides,
) -> str:
    loader = renderer.loader
    if loader is None:
        return renderer.diagnostic(f"{{% {keyword} !!template loader not configured %}}")

    name = template_name(node.expression)
    if renderer.depth >= renderer.max_depth:
        return renderer.diagnostic(f'{{% {keyword} "{name}" !!maximum template depth exceeded %}}')

    try:
        source = loader(name)
        if source is None:
            return renderer.diagnostic(f'{{% {keyword} "{name}" !!template not found %}}')
        tree = renderer.engine.parse(source)
        logger.debug("Rendering %s '%s' at depth %d", keyword, name, renderer.depth + 1)
        renderer.depth += 1
        try:
            return renderer.render_root(tree, context, overrides)
        finally:
            renderer.depth -= 1
    except Exception as e:
        return renderer.diagnostic(f'{{% {keyword} "{name}" !!{e} %}}')


__all__ = [
    "find_extends",
    "collect_blocks",
    "template_name",
    "render_extends",
    "render_include",
    "render_block",
]

"""
Template engine public API and renderer.

``Template`` owns the registries, loader, escape function and the parse
cache. Each ``render`` call creates a ``TemplateRenderer`` holding the
per-call state, so one ``Template`` may be shared between threads.

Rendering never raises for template problems: errors in expressions,
paths, filters, tests or the loader become inline diagnostics such as
``{{a / 0!!division by zero}}``, escaped like any other output.
"""

from __future__ import annotations

import logging
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from . import blocks
from .context import extend_context, iterate_collection, resolve_path, split_quoted
from .lexer import TemplateLexer
from .loaders import FileSystemLoader, TemplateLoader
from .nodes import (
    BlockNode,
    ElseIfNode,
    ElseNode,
    ForNode,
    IfNode,
    IncludeNode,
    RootNode,
    TemplateNode,
    TextNode,
    VariableNode,
)
from .parser import TemplateParser
from ..config import EngineConfig
from ..errors import TemplateError
from ..expressions import ExpressionEvaluator
from ..expressions.values import format_number
from ..filters import apply_filters, get_builtin_filters, get_builtin_tests, parse_arguments
from ..markup import EscapeFunc, RawValue, escape_html

logger = logging.getLogger(__name__)

FilterFunc = Callable[..., Any]
TestFunc = Callable[..., bool]

_FOR_HEADER = re.compile(
    r"^([A-Za-z_][A-Za-z0-9_]*(?:\s*,\s*[A-Za-z_][A-Za-z0-9_]*)?)\s+in\s+(.+)$",
    re.DOTALL,
)


class Template:
    """
    Template engine.

    Args:
        loader: Callable returning template source by name (None if missing);
                required for extends, include and render_file
        filters: Extra filters, overriding built-ins of the same name
        tests: Extra ``is`` tests, overriding built-ins of the same name
        escape: Output escape function (HTML escaping by default)
        config: Engine settings
    """

    def __init__(
        self,
        loader: Optional[TemplateLoader] = None,
        filters: Optional[Mapping[str, FilterFunc]] = None,
        tests: Optional[Mapping[str, TestFunc]] = None,
        *,
        escape: EscapeFunc = escape_html,
        config: Optional[EngineConfig] = None,
    ):
        self.loader = loader
        self.config = config or EngineConfig()
        self.escape = escape

        self.filters: Dict[str, FilterFunc] = get_builtin_filters()
        self.filters.update(filters or {})
        self.tests: Dict[str, TestFunc] = get_builtin_tests()
        self.tests.update(tests or {})

        # Parsed trees keyed by source text
        self._tree_cache: OrderedDict[str, RootNode] = OrderedDict()
        self._cache_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: EngineConfig, **kwargs: Any) -> Template:
        """Create an engine; a FileSystemLoader is built when template_dir is set."""
        if "loader" not in kwargs and config.template_dir:
            kwargs["loader"] = FileSystemLoader(config.template_dir, encoding=config.encoding)
        return cls(config=config, **kwargs)

    def render(
        self,
        source: str,
        data: Mapping[str, Any],
        filters: Optional[Mapping[str, FilterFunc]] = None,
    ) -> str:
        """
        Render template source with data.

        Args:
            source: Template source text
            data: Data context; never modified
            filters: Filters for this call only, overriding all others

        Returns:
            Rendered text
        """
        tree = self.parse(source)
        renderer = TemplateRenderer(self, self._merge_filters(filters))
        return renderer.render_root(tree, data, {})

    def render_file(
        self,
        name: str,
        data: Mapping[str, Any],
        filters: Optional[Mapping[str, FilterFunc]] = None,
    ) -> str:
        """
        Load a template through the loader and render it.

        Raises:
            TemplateError: No loader configured or template not found
        """
        if self.loader is None:
            raise TemplateError("template loader not configured")
        source = self.loader(name)
        if source is None:
            raise TemplateError(f"template `{name}` not found")
        return self.render(source, data, filters)

    def parse(self, source: str) -> RootNode:
        """Tokenize and parse source, reusing cached trees."""
        cache_size = self.config.cache_size
        if cache_size:
            with self._cache_lock:
                tree = self._tree_cache.get(source)
                if tree is not None:
                    self._tree_cache.move_to_end(source)
                    return tree

        tokens = TemplateLexer(source).tokenize()
        tree = TemplateParser(tokens).parse()
        logger.debug("Parsed template -> %d tokens, %d top-level nodes", len(tokens), len(tree.children))

        if cache_size:
            with self._cache_lock:
                self._tree_cache[source] = tree
                while len(self._tree_cache) > cache_size:
                    self._tree_cache.popitem(last=False)
        return tree

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._tree_cache.clear()

    def _merge_filters(self, filters: Optional[Mapping[str, FilterFunc]]) -> Mapping[str, FilterFunc]:
        if not filters:
            return self.filters
        merged = dict(self.filters)
        merged.update(filters)
        return merged


@dataclass
class IfChain:
    """State of the if/elseif/else chain among one list of siblings."""
    open: bool = False
    fired: bool = False


class TemplateRenderer:
    """
    Renders syntax trees for one ``Template.render`` call.
    """

    def __init__(self, engine: Template, filters: Mapping[str, FilterFunc]):
        self.engine = engine
        self.filters = filters
        self.loader = engine.loader
        self.escape = engine.escape
        self.max_depth = engine.config.max_depth
        self.depth = 0
        self.evaluator = ExpressionEvaluator(resolve_path, engine.tests, parse_arguments)

    # ======= Tree walking =======

    def render_root(
        self,
        root: RootNode,
        context: Mapping[str, Any],
        overrides: blocks.BlockOverrides,
    ) -> str:
        """Render a template root, following its extends if it has one."""
        extends = blocks.find_extends(root)
        if extends is not None:
            return blocks.render_extends(self, extends, root, context, overrides)
        return self.render_children(root, context, overrides)

    def render_children(
        self,
        node: TemplateNode,
        context: Mapping[str, Any],
        overrides: blocks.BlockOverrides,
    ) -> str:
        """
        Render the children of a node.

        ``overrides`` holds the block replacements of an inheriting template;
        bodies of if/elseif/else/for are always rendered without them.
        """
        parts: List[str] = []
        chain = IfChain()

        for child in node.children:
            if isinstance(child, TextNode):
                parts.append(child.text)
            elif isinstance(child, VariableNode):
                parts.append(self._render_variable(child, context))
            elif isinstance(child, IfNode):
                parts.append(self._render_if(child, context, chain))
            elif isinstance(child, ElseIfNode):
                parts.append(self._render_elseif(child, context, chain))
            elif isinstance(child, ElseNode):
                parts.append(self._render_else(child, context, chain))
            elif isinstance(child, ForNode):
                parts.append(self._render_for(child, context))
            elif isinstance(child, BlockNode):
                parts.append(blocks.render_block(self, child, context, overrides))
            elif isinstance(child, IncludeNode):
                parts.append(blocks.render_include(self, child, context))
            # A misplaced extends renders nothing

        return "".join(parts)

    def diagnostic(self, text: str) -> str:
        """Escape an inline error marker for output."""
        logger.debug("Template diagnostic: %s", text)
        return self.escape(text)

    # ======= Node handlers =======

    def _render_variable(self, node: VariableNode, context: Mapping[str, Any]) -> str:
        expression = node.expression or ""
        try:
            value = self._evaluate(expression, context)
        except Exception as e:
            return self.diagnostic(f"{{{{{expression}!!{e}}}}}")
        if isinstance(value, RawValue):
            return self.escape(value)
        return self.escape(_output_string(value))

    def _render_if(self, node: IfNode, context: Mapping[str, Any], chain: IfChain) -> str:
        chain.open = True
        chain.fired = False
        try:
            value = self._evaluate(node.expression or "", context)
        except Exception as e:
            return self.diagnostic(f"{{% if {node.expression}!!{e} %}}")
        if not value:
            return ""
        chain.fired = True
        return self.render_children(node, context, {})

    def _render_elseif(self, node: ElseIfNode, context: Mapping[str, Any], chain: IfChain) -> str:
        if not chain.open:
            return self.diagnostic("{% elseif !!could not find matching `if` %}")
        if chain.fired:
            return ""
        try:
            value = self._evaluate(node.expression or "", context)
        except Exception as e:
            return self.diagnostic(f"{{% elseif {node.expression}!!{e} %}}")
        if not value:
            return ""
        chain.fired = True
        return self.render_children(node, context, {})

    def _render_else(self, node: ElseNode, context: Mapping[str, Any], chain: IfChain) -> str:
        if not chain.open:
            return self.diagnostic("{% else !!could not find matching `if` %}")
        fired = chain.fired
        chain.open = False
        chain.fired = False
        if fired:
            return ""
        return self.render_children(node, context, {})

    def _render_for(self, node: ForNode, context: Mapping[str, Any]) -> str:
        expression = node.expression or ""
        match = _FOR_HEADER.match(expression)
        if not match:
            return self.diagnostic(
                f'{{% for {expression}!!invalid syntax, expected "item in array" or "key, value in array" %}}'
            )

        names = [name.strip() for name in match.group(1).split(",")]
        parts = split_quoted("|", match.group(2))
        try:
            value = resolve_path(parts[0].strip(), context)
            value = apply_filters(value, parts[1:], self.filters, context)
            items = iterate_collection(value)
        except Exception as e:
            return self.diagnostic(f"{{% for {expression}!!{e} %}}")

        output: List[str] = []
        for key, item in items:
            if len(names) == 2:
                variables = {names[0]: key, names[1]: item}
            else:
                variables = {names[0]: item}
            output.append(self.render_children(node, extend_context(context, variables), {}))
        return "".join(output)

    def _evaluate(self, expression: str, context: Mapping[str, Any]) -> Any:
        """Evaluate ``expr|filter|...``."""
        parts = split_quoted("|", expression)
        value = self.evaluator.evaluate(parts[0], context)
        return apply_filters(value, parts[1:], self.filters, context)


def _output_string(value: Any) -> str:
    """String form of a rendered value: bools as "1"/"", containers as ""."""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return format_number(value)
    return ""


__all__ = ["Template", "TemplateRenderer", "IfChain"]

"""
Tests for directive classification and syntax tree construction.
"""

import pytest

from minty.template.directives import DirectiveKind, classify_directive
from minty.template.nodes import (
    BlockNode,
    ElseIfNode,
    ElseNode,
    ExtendsNode,
    ForNode,
    IfNode,
    IncludeNode,
    NodeKind,
    RootNode,
    TextNode,
    VariableNode,
)
from minty.template.parser import parse_template


def shape(node):
    """Compact (kind, expression, children) view of a tree, without empty text."""
    children = [
        shape(child) for child in node.children
        if not (isinstance(child, TextNode) and child.text == "")
    ]
    if isinstance(node, TextNode):
        return node.text
    return (node.kind.value, node.expression, children) if children else (node.kind.value, node.expression)


class TestClassifyDirective:

    @pytest.mark.parametrize("text,kind,expression", [
        ("if a > 1", DirectiveKind.IF, "a > 1"),
        ("elseif b", DirectiveKind.ELSEIF, "b"),
        ("else", DirectiveKind.ELSE, None),
        ("endif", DirectiveKind.ENDIF, None),
        ("for x in xs", DirectiveKind.FOR, "x in xs"),
        ("endfor", DirectiveKind.ENDFOR, None),
        ("block  content ", DirectiveKind.BLOCK, "content"),
        ("endblock", DirectiveKind.ENDBLOCK, None),
        ('extends "base.html"', DirectiveKind.EXTENDS, '"base.html"'),
        ("include 'nav.html'", DirectiveKind.INCLUDE, "'nav.html'"),
        ("if\na\n>\n5", DirectiveKind.IF, "a\n>\n5"),
    ])
    def test_keywords(self, text, kind, expression):
        directive = classify_directive(text)
        assert directive.kind is kind
        assert directive.expression == expression

    @pytest.mark.parametrize("text", ["name", "iffy", "format|upper", "endifx", "if"])
    def test_plain_expressions(self, text):
        """Anything else renders as a variable."""
        directive = classify_directive(text)
        assert directive.kind is DirectiveKind.VAR
        assert directive.expression == text

    def test_scope_flags(self):
        assert DirectiveKind.ELSE.closes_scope and DirectiveKind.ELSE.opens_scope
        assert DirectiveKind.ENDIF.closes_scope and not DirectiveKind.ENDIF.opens_scope
        assert DirectiveKind.FOR.opens_scope and not DirectiveKind.FOR.closes_scope
        assert not DirectiveKind.INCLUDE.opens_scope


class TestTemplateParser:

    def test_text_only(self):
        root = parse_template("hello")
        assert isinstance(root, RootNode)
        assert shape(root) == ("root", None, ["hello"])

    def test_variable(self):
        root = parse_template("a {{ b }} c")
        assert shape(root) == ("root", None, ["a ", ("var", "b"), " c"])
        assert isinstance(root.children[1], VariableNode)

    def test_if_chain_siblings(self):
        """elseif and else become siblings of the if, each with its own body."""
        root = parse_template("{% if a %}A{% elseif b %}B{% else %}C{% endif %}")
        assert shape(root) == ("root", None, [
            ("if", "a", ["A"]),
            ("elseif", "b", ["B"]),
            ("else", None, ["C"]),
        ])
        assert [type(n) for n in root.children if not isinstance(n, TextNode)] == [
            IfNode, ElseIfNode, ElseNode,
        ]

    def test_nested_scopes(self):
        root = parse_template("{% for x in xs %}{% if x %}{{ x }}{% endif %}{% endfor %}")
        assert shape(root) == ("root", None, [
            ("for", "x in xs", [("if", "x", [("var", "x")])]),
        ])

    def test_block_extends_include(self):
        root = parse_template("{% extends 'base' %}{% block main %}{% include 'p' %}{% endblock %}")
        nodes = [n for n in root.children if not isinstance(n, TextNode)]
        assert isinstance(nodes[0], ExtendsNode)
        assert isinstance(nodes[1], BlockNode)
        assert nodes[1].name == "main"
        included = [n for n in nodes[1].children if not isinstance(n, TextNode)]
        assert isinstance(included[0], IncludeNode)
        assert included[0].expression == "'p'"

    def test_unrecognized_directive_is_variable(self):
        root = parse_template("{% name %}")
        assert shape(root) == ("root", None, [("var", "name")])

    def test_unmatched_closer_dropped(self):
        """A closer at the top level is ignored."""
        root = parse_template("a{% endif %}b")
        assert shape(root) == ("root", None, ["a", "b"])

    def test_unclosed_scope(self):
        """Scopes left open run to the end of the template."""
        root = parse_template("{% if a %}body")
        assert shape(root) == ("root", None, [("if", "a", ["body"])])

    def test_for_node_type(self):
        root = parse_template("{% for k, v in m %}{% endfor %}")
        node = [n for n in root.children if not isinstance(n, TextNode)][0]
        assert isinstance(node, ForNode)
        assert node.kind is NodeKind.FOR
        assert node.expression == "k, v in m"

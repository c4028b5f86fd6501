"""
Syntax tree builder for templates.

Turns the alternating TEXT / tag token stream into a tree. Scopes are
tracked with an ancestor stack: openers (if, elseif, else, for, block)
become the current node, closers (endif, endfor, endblock, elseif, else)
return to the parent first. ``elseif`` and ``else`` therefore end the
previous branch and open a sibling of it.
"""

from __future__ import annotations

import logging
from typing import List

from .directives import Directive, DirectiveKind, classify_directive
from .lexer import TemplateLexer
from .nodes import NODE_TYPES, NodeKind, RootNode, TemplateNode, TextNode
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

_NODE_KIND = {
    DirectiveKind.IF: NodeKind.IF,
    DirectiveKind.ELSEIF: NodeKind.ELSEIF,
    DirectiveKind.ELSE: NodeKind.ELSE,
    DirectiveKind.FOR: NodeKind.FOR,
    DirectiveKind.BLOCK: NodeKind.BLOCK,
    DirectiveKind.EXTENDS: NodeKind.EXTENDS,
    DirectiveKind.INCLUDE: NodeKind.INCLUDE,
    DirectiveKind.VAR: NodeKind.VARIABLE,
}


class TemplateParser:
    """
    Stack-based tree builder.

    Mismatched structure never raises: closers without an open scope are
    dropped and scopes left open at the end are closed implicitly.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens

    def parse(self) -> RootNode:
        """
        Build the syntax tree.

        Returns:
            Root node whose children are the top-level nodes
        """
        root = RootNode()
        current: TemplateNode = root
        stack: List[TemplateNode] = []

        for token in self.tokens:
            if token.type is TokenType.TEXT:
                current.children.append(TextNode(token.value))
                continue

            directive = self._classify(token)
            if directive.kind.closes_scope:
                if stack:
                    current = stack.pop()
                else:
                    logger.debug(
                        "Dropping unmatched '%s' at %d:%d",
                        directive.kind.value, token.line, token.column,
                    )

            if directive.kind in (DirectiveKind.ENDIF, DirectiveKind.ENDFOR, DirectiveKind.ENDBLOCK):
                continue

            node = NODE_TYPES[_NODE_KIND[directive.kind]](directive.expression)
            current.children.append(node)
            if directive.kind.opens_scope:
                stack.append(current)
                current = node

        if stack:
            logger.debug("Closing %d unterminated scope(s) at end of template", len(stack))
        return root

    @staticmethod
    def _classify(token: Token) -> Directive:
        if token.type is TokenType.VARIABLE:
            return Directive(DirectiveKind.VAR, token.value)
        return classify_directive(token.value)


def parse_template(text: str) -> RootNode:
    """
    Convenience function: tokenize and parse a template source.

    Args:
        text: Template source

    Returns:
        Root of the syntax tree
    """
    tokens = TemplateLexer(text).tokenize()
    return TemplateParser(tokens).parse()


__all__ = ["TemplateParser", "parse_template"]

"""Base syntax tree visitors."""

from __future__ import annotations

from io import StringIO
from typing import Sequence

from forum_markup.core.bbcode.nodes import (
    ErrorNode,
    MarkupNode,
    SequenceNode,
    TagNode,
    TextNode,
)


class SyntaxTreeVisitor:
    """Tree-to-tree transform over the closed node variant set.

    Every ``visit_*`` method returns the node that replaces the visited one.
    The defaults keep leaves as they are and rebuild containers from their
    visited children, so subclasses only override the variants they rewrite.
    """

    # -- leaf visitors (identity by default) --

    def visit_text(self, node: TextNode) -> MarkupNode:
        return node

    def visit_error(self, node: ErrorNode) -> MarkupNode:
        return node

    # -- container visitors (recurse by default) --

    def visit_tag(self, node: TagNode) -> MarkupNode:
        return self._rebuild(node)

    def visit_sequence(self, node: SequenceNode) -> MarkupNode:
        return self._rebuild(node)

    # -- dispatch --

    def visit(self, node: MarkupNode) -> MarkupNode:
        if isinstance(node, TextNode):
            return self.visit_text(node)
        elif isinstance(node, TagNode):
            return self.visit_tag(node)
        elif isinstance(node, SequenceNode):
            return self.visit_sequence(node)
        elif isinstance(node, ErrorNode):
            return self.visit_error(node)
        else:
            raise TypeError(f"Unknown syntax tree node type: {type(node).__name__}")

    def visit_many(self, nodes: Sequence[MarkupNode]) -> list[MarkupNode]:
        return [self.visit(node) for node in nodes]

    def _rebuild(self, node: MarkupNode) -> MarkupNode:
        children = self.visit_many(node.children)
        if all(new is old for new, old in zip(children, node.children)):
            return node
        return node.with_children(children)


class RenderVisitor:
    """Walks a syntax tree and writes one representation into a buffer.

    Subclasses implement the leaf and tag visitors; sequences simply render
    their children in order.
    """

    def __init__(self, buffer: StringIO) -> None:
        self._buffer = buffer

    def visit_text(self, node: TextNode) -> None:
        raise NotImplementedError

    def visit_error(self, node: ErrorNode) -> None:
        raise NotImplementedError

    def visit_tag(self, node: TagNode) -> None:
        raise NotImplementedError

    def visit_sequence(self, node: SequenceNode) -> None:
        self.visit_many(node.children)

    # -- dispatch --

    def visit(self, node: MarkupNode) -> None:
        if isinstance(node, TextNode):
            self.visit_text(node)
        elif isinstance(node, TagNode):
            self.visit_tag(node)
        elif isinstance(node, SequenceNode):
            self.visit_sequence(node)
        elif isinstance(node, ErrorNode):
            self.visit_error(node)
        else:
            raise TypeError(f"Unknown syntax tree node type: {type(node).__name__}")

    def visit_many(self, nodes: Sequence[MarkupNode]) -> None:
        for node in nodes:
            self.visit(node)

    # -- static entry point --

    @classmethod
    def format(cls, node: MarkupNode) -> str:
        """Render *node* and return the accumulated output."""
        buf = StringIO()
        cls(buf).visit(node)
        return buf.getvalue()

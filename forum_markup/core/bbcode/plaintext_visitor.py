"""Plain text renderer - drops every tag wrapper."""

from __future__ import annotations

from forum_markup.core.bbcode.nodes import ErrorNode, TagNode, TextNode
from forum_markup.core.bbcode.visitor import RenderVisitor


class PlainTextRenderer(RenderVisitor):
    """Renders only the text content of a syntax tree.

    Content-as-attribute tags (images, smileys) have no text and render as
    nothing.
    """

    def visit_text(self, node: TextNode) -> None:
        self._buffer.write(node.text)

    def visit_error(self, node: ErrorNode) -> None:
        self._buffer.write(node.text)

    def visit_tag(self, node: TagNode) -> None:
        self.visit_many(node.children)

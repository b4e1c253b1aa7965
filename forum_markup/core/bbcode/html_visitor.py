"""HTML renderer - turns a syntax tree into the display body of a post."""

from __future__ import annotations

from html import escape as html_escape
from string import Template

from forum_markup.core.bbcode.markup_visitor import MarkupRenderer
from forum_markup.core.bbcode.nodes import ErrorNode, TagNode, TextNode
from forum_markup.core.bbcode.tags import CONTENT_ATTRIBUTE
from forum_markup.core.bbcode.visitor import RenderVisitor


def _html_encode(text: str) -> str:
    return html_escape(text, quote=True)


class HtmlRenderer(RenderVisitor):
    """Renders tags through their definition's templates, escaping all text."""

    # -- text --

    def visit_text(self, node: TextNode) -> None:
        self._buffer.write(_html_encode(node.text))

    def visit_error(self, node: ErrorNode) -> None:
        # Fail open: the author sees exactly what they typed
        self._buffer.write(_html_encode(node.text))

    # -- tags --

    def visit_tag(self, node: TagNode) -> None:
        definition = node.definition

        if definition.content_as_attribute:
            inner = ""
        elif definition.allows_nested_tags:
            inner = "".join(HtmlRenderer.format(child) for child in node.children)
        else:
            inner = _html_encode("".join(MarkupRenderer.format(child) for child in node.children))

        values = {name: _html_encode(value) for name, value in node.attributes.items()}
        values.setdefault(CONTENT_ATTRIBUTE, inner)

        self._buffer.write(Template(definition.opening_template).safe_substitute(values))
        self._buffer.write(inner)
        self._buffer.write(Template(definition.closing_template).safe_substitute(values))

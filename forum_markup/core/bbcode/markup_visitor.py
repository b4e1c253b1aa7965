"""Markup renderer - reproduces the canonical BBCode of a syntax tree."""

from __future__ import annotations

import re

from forum_markup.core.bbcode.nodes import ErrorNode, TagNode, TextNode
from forum_markup.core.bbcode.tags import CONTENT_ATTRIBUTE
from forum_markup.core.bbcode.visitor import RenderVisitor

_NEEDS_QUOTES = re.compile(r"[\s\[\]]")


def _format_value(value: str) -> str:
    if not _NEEDS_QUOTES.search(value):
        return value
    if '"' in value:
        return f"'{value}'"
    return f'"{value}"'


def opening_markup(node: TagNode) -> str:
    """Return the ``[name=value attr=value]`` construct for *node*.

    Attributes still holding their default value are omitted.
    """
    definition = node.definition
    parts = [f"[{definition.name}"]
    seen: set[str] = set()

    own = definition.own_value_attribute
    if own is not None:
        seen.add(own.name)
        value = node.attributes.get(own.name, own.default)
        if value != own.default:
            parts.append(f"={_format_value(value)}")

    for attribute in definition.attributes:
        if attribute.own_value or attribute.name in seen:
            continue
        seen.add(attribute.name)
        value = node.attributes.get(attribute.name, attribute.default)
        if value != attribute.default:
            parts.append(f" {attribute.name}={_format_value(value)}")

    parts.append("]")
    return "".join(parts)


class MarkupRenderer(RenderVisitor):
    """Renders a syntax tree back to bracket markup."""

    def visit_text(self, node: TextNode) -> None:
        self._buffer.write(node.text)

    def visit_error(self, node: ErrorNode) -> None:
        self._buffer.write(node.text)

    def visit_tag(self, node: TagNode) -> None:
        self._buffer.write(opening_markup(node))
        if node.definition.content_as_attribute:
            self._buffer.write(node.attributes.get(CONTENT_ATTRIBUTE, ""))
        else:
            self.visit_many(node.children)
        self._buffer.write(f"[/{node.definition.name}]")

"""Smiley tokenization and resolution.

Smiley codes are swapped for positional placeholders before the body is
parsed, so markup parsing and HTML escaping never see (or mangle) their
punctuation.  After parsing, :class:`SmileyResolver` rewrites the tree,
turning each placeholder into a smiley image node.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence

from forum_markup.core.bbcode.nodes import (
    ErrorNode,
    MarkupNode,
    SequenceNode,
    TagNode,
    TextNode,
)
from forum_markup.core.bbcode.tags import CONTENT_ATTRIBUTE, SMILEY_TAG
from forum_markup.core.bbcode.visitor import SyntaxTreeVisitor
from forum_markup.core.models.smiley import Smiley

# Private-use code points: no markup meaning, untouched by HTML escaping
_SENTINEL_OPEN = "\ue000"
_SENTINEL_CLOSE = "\ue001"

_PLACEHOLDER_PATTERN = re.compile(f"{_SENTINEL_OPEN}SMILEY_(\\d+){_SENTINEL_CLOSE}")
_SENTINELS = re.compile(f"[{_SENTINEL_OPEN}{_SENTINEL_CLOSE}]")


def placeholder(index: int) -> str:
    return f"{_SENTINEL_OPEN}SMILEY_{index}{_SENTINEL_CLOSE}"


def strip_placeholder_sentinels(text: str) -> str:
    """Remove sentinel characters so user input can never forge a placeholder."""
    return _SENTINELS.sub("", text)


def tokenize_smileys(text: str, smileys: Sequence[Smiley]) -> str:
    """Replace whole-word smiley codes with positional placeholders.

    A code only matches when it stands alone: at the start of the text or
    after whitespace, and followed by whitespace or the end of the text.
    """
    for index, smiley in enumerate(smileys):
        if not smiley.code:
            continue
        pattern = re.compile(r"(^|\s)" + re.escape(smiley.code) + r"(?=$|\s)")
        token = placeholder(index)
        text = pattern.sub(lambda m: m.group(1) + token, text)
    return text


class _CodeRestorer(SyntaxTreeVisitor):
    """Puts the original smiley codes back into literal text."""

    def __init__(self, restore: Callable[[str], str]) -> None:
        self._restore = restore

    def visit_text(self, node: TextNode) -> MarkupNode:
        return TextNode(self._restore(node.text))

    def visit_error(self, node: ErrorNode) -> MarkupNode:
        return ErrorNode(self._restore(node.text))


class SmileyResolver(SyntaxTreeVisitor):
    """Rewrites smiley placeholders in a syntax tree.

    Placeholders in ordinary text become smiley image tags.  Inside
    verbatim tags (code blocks) and attribute values the original code is
    restored instead, since those render literally.
    """

    def __init__(self, smileys: Sequence[Smiley]) -> None:
        self._smileys = list(smileys)

    def restore_codes(self, text: str) -> str:
        def _code(m: re.Match[str]) -> str:
            smiley = self._get(int(m.group(1)))
            return smiley.code if smiley is not None else ""

        return _PLACEHOLDER_PATTERN.sub(_code, text)

    def _get(self, index: int) -> Smiley | None:
        if 0 <= index < len(self._smileys):
            return self._smileys[index]
        return None

    def _split(self, text: str, make_node: Callable[[str], MarkupNode]) -> list[MarkupNode] | None:
        # With one capture group, split yields text, index, text, index, ..., text
        parts = _PLACEHOLDER_PATTERN.split(text)
        if len(parts) == 1:
            return None

        nodes: list[MarkupNode] = []
        for position, part in enumerate(parts):
            if position % 2 == 0:
                if part:
                    nodes.append(make_node(part))
                continue
            smiley = self._get(int(part))
            if smiley is not None:
                nodes.append(TagNode(SMILEY_TAG, {CONTENT_ATTRIBUTE: smiley.path}))
        return nodes

    # -- visitors --

    def visit_text(self, node: TextNode) -> MarkupNode:
        nodes = self._split(node.text, TextNode)
        if nodes is None:
            return node
        return nodes[0] if len(nodes) == 1 else SequenceNode(nodes)

    def visit_error(self, node: ErrorNode) -> MarkupNode:
        nodes = self._split(node.text, ErrorNode)
        if nodes is None:
            return node
        return nodes[0] if len(nodes) == 1 else SequenceNode(nodes)

    def visit_tag(self, node: TagNode) -> MarkupNode:
        attributes = {name: self.restore_codes(value) for name, value in node.attributes.items()}

        if node.definition.allows_nested_tags:
            children = self.visit_many(node.children)
        else:
            restorer = _CodeRestorer(self.restore_codes)
            children = restorer.visit_many(node.children)

        return TagNode(node.definition, attributes, children)

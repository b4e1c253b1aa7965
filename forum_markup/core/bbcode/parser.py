"""BBCode parser.

The source is first cut into tokens: literal text, opening constructs
(``[name]``, ``[name=value]``, ``[name attr=value ...]``) and closing
constructs (``[/name]``).  Only constructs naming a tag from the grammar
become tokens; anything else stays literal text.  A recursive descent over
the tokens then builds the tree.

Parsing never fails.  A construct that cannot be validated degrades to an
:class:`ErrorNode` carrying its literal source, because a single bad tag must
not prevent a post from rendering.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from forum_markup.core.bbcode.nodes import (
    ErrorNode,
    MarkupNode,
    SequenceNode,
    TagNode,
    TextNode,
)
from forum_markup.core.bbcode.tags import CONTENT_ATTRIBUTE, TagDefinition, get_tag

# ---------------------------------------------------------------------------
# Lexical patterns
# ---------------------------------------------------------------------------

_MAX_DEPTH = 32

_NAME = r"[A-Za-z][A-Za-z0-9]*"
# Values never span a bracket, so a failed match at one "[" cannot rescan
# past the next one.
_VALUE = r"""(?:"[^"\[\]]*"|'[^'\[\]]*'|[^\[\]\s]*)"""

_TAG_PATTERN = re.compile(
    r"\["
    rf"(?:/(?P<close>{_NAME})"
    rf"|(?P<open>{_NAME})"
    rf"(?:=(?P<value>{_VALUE}))?"
    rf"(?P<attributes>(?:\s+{_NAME}={_VALUE})*)"
    r"\s*)"
    r"\]"
)

_ATTRIBUTE_PATTERN = re.compile(rf"({_NAME})=({_VALUE})")


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class _TokenKind(Enum):
    TEXT = "text"
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class _Token:
    kind: _TokenKind
    start: int
    end: int
    definition: TagDefinition | None = None
    attributes: Mapping[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.definition.name if self.definition is not None else ""


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _bind_attributes(definition: TagDefinition, m: re.Match[str]) -> dict[str, str]:
    """Bind the values written in an opening construct to *definition*.

    ``[tag=value]`` feeds the own-value attribute.  Named pairs feed the
    matching named attribute; unknown names are ignored.
    """
    values: dict[str, str] = {}

    own = definition.own_value_attribute
    if own is not None and m.group("value") is not None:
        values[own.name] = _unquote(m.group("value"))

    for name, raw_value in _ATTRIBUTE_PATTERN.findall(m.group("attributes") or ""):
        attribute = definition.find_named_attribute(name)
        if attribute is None:
            continue
        values.setdefault(attribute.name, _unquote(raw_value))

    return values


def _tokenize(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    text_start = 0

    for m in _TAG_PATTERN.finditer(source):
        close_name = m.group("close")
        definition = get_tag(close_name or m.group("open"))
        if definition is None:
            # Unknown tag: stays part of the surrounding literal text
            continue

        if m.start() > text_start:
            tokens.append(_Token(_TokenKind.TEXT, text_start, m.start()))

        if close_name is not None:
            tokens.append(_Token(_TokenKind.CLOSE, m.start(), m.end(), definition))
        else:
            tokens.append(
                _Token(
                    _TokenKind.OPEN,
                    m.start(),
                    m.end(),
                    definition,
                    _bind_attributes(definition, m),
                )
            )
        text_start = m.end()

    if text_start < len(source):
        tokens.append(_Token(_TokenKind.TEXT, text_start, len(source)))

    return tokens


# ---------------------------------------------------------------------------
# Recursive descent
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, source: str) -> None:
        self._source = source
        self._tokens = _tokenize(source)
        self._pos = 0
        # Token indices of the closing constructs, per tag name, ascending
        self._closes: dict[str, list[int]] = {}
        for index, token in enumerate(self._tokens):
            if token.kind is _TokenKind.CLOSE:
                self._closes.setdefault(token.name, []).append(index)

    def _slice(self, token: _Token) -> str:
        return self._source[token.start : token.end]

    def _scope_end(self, open_names: tuple[str, ...]) -> int:
        """Advance to the next closing token of an enclosing tag (or the end).

        Returns the source offset where the current scope ends.  The closing
        token itself is left for the enclosing tag to consume.
        """
        while self._pos < len(self._tokens):
            token = self._tokens[self._pos]
            if token.kind is _TokenKind.CLOSE and token.name in open_names:
                return token.start
            self._pos += 1
        return len(self._source)

    def parse_sequence(
        self,
        depth: int,
        open_names: tuple[str, ...],
    ) -> tuple[list[MarkupNode], _Token | None]:
        """Parse siblings until the input ends or an enclosing tag closes.

        Returns the nodes and the (unconsumed) closing token that stopped
        the scan, or None at the end of input.
        """
        nodes: list[MarkupNode] = []

        while self._pos < len(self._tokens):
            token = self._tokens[self._pos]

            if token.kind is _TokenKind.TEXT:
                nodes.append(TextNode(self._slice(token)))
                self._pos += 1
            elif token.kind is _TokenKind.CLOSE:
                if token.name in open_names:
                    return nodes, token
                # Stray closing construct
                nodes.append(ErrorNode(self._slice(token)))
                self._pos += 1
            else:
                nodes.append(self._parse_tag(depth, open_names))

        return nodes, None

    def _parse_tag(self, depth: int, open_names: tuple[str, ...]) -> MarkupNode:
        opening = self._tokens[self._pos]
        definition = opening.definition
        assert definition is not None
        self._pos += 1

        if depth >= _MAX_DEPTH:
            return ErrorNode(self._slice(opening))

        if not definition.allows_nested_tags:
            return self._parse_verbatim(opening, open_names)

        children, stop = self.parse_sequence(depth + 1, open_names + (definition.name,))
        if stop is not None and stop.name == definition.name:
            self._pos += 1
            if not definition.accepts(opening.attributes):
                return ErrorNode(self._source[opening.start : stop.end])
            return TagNode(definition, opening.attributes, children)

        # Unmatched: the opening construct and the rest of its scope are literal
        end = stop.start if stop is not None else len(self._source)
        return ErrorNode(self._source[opening.start : end])

    def _parse_verbatim(self, opening: _Token, open_names: tuple[str, ...]) -> MarkupNode:
        definition = opening.definition
        assert definition is not None

        closes = self._closes.get(definition.name, [])
        found = bisect_left(closes, self._pos)
        if found == len(closes):
            end = self._scope_end(open_names)
            return ErrorNode(self._source[opening.start : end])

        index = closes[found]
        closing = self._tokens[index]
        content = self._source[opening.end : closing.start]
        self._pos = index + 1

        if definition.content_as_attribute:
            attributes = dict(opening.attributes)
            attributes[CONTENT_ATTRIBUTE] = content.strip()
            if not definition.accepts(attributes):
                return ErrorNode(self._source[opening.start : closing.end])
            return TagNode(definition, attributes)

        children = [TextNode(content)] if content else []
        return TagNode(definition, opening.attributes, children)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse(markup: str) -> SequenceNode:
    """Parse BBCode text into a syntax tree rooted at a :class:`SequenceNode`."""
    nodes, _ = _Parser(markup).parse_sequence(0, ())
    return SequenceNode(nodes)

"""BBCode syntax tree node types."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from forum_markup.core.bbcode.tags import CONTENT_ATTRIBUTE, TagDefinition

if TYPE_CHECKING:
    from forum_markup.core.bbcode.visitor import SyntaxTreeVisitor


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RenderTarget(Enum):
    HTML = "html"
    MARKUP = "markup"
    TEXT = "text"


# ---------------------------------------------------------------------------
# Base node
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class MarkupNode:
    """Abstract base for every syntax tree node.

    Nodes are immutable.  Every node exposes an ordered ``children`` tuple
    (empty for leaves); edits go through :meth:`with_children`, which
    returns a new node.
    """

    if TYPE_CHECKING:
        children: Sequence[MarkupNode]

    # -- rendering --

    def render(self, target: RenderTarget) -> str:
        # Lazy import: the renderers import the node classes
        from forum_markup.core.bbcode.html_visitor import HtmlRenderer
        from forum_markup.core.bbcode.markup_visitor import MarkupRenderer
        from forum_markup.core.bbcode.plaintext_visitor import PlainTextRenderer

        renderer = {
            RenderTarget.HTML: HtmlRenderer,
            RenderTarget.MARKUP: MarkupRenderer,
            RenderTarget.TEXT: PlainTextRenderer,
        }[target]
        return renderer.format(self)

    def to_html(self) -> str:
        return self.render(RenderTarget.HTML)

    def to_markup(self) -> str:
        return self.render(RenderTarget.MARKUP)

    def to_text(self) -> str:
        return self.render(RenderTarget.TEXT)

    # -- structure --

    def with_children(self, children: Iterable[MarkupNode] | None) -> MarkupNode:
        if children is None:
            raise ValueError("children must not be None")
        return self._replace_children(tuple(children))

    def _replace_children(self, children: tuple[MarkupNode, ...]) -> MarkupNode:
        return replace(self, children=children)

    def accept(self, visitor: SyntaxTreeVisitor) -> MarkupNode:
        return visitor.visit(self)

    # -- equality --

    def _same_data(self, other: MarkupNode) -> bool:
        return True

    def structurally_equals(self, other: object) -> bool:
        """Compare variant, attached data and every child, in order."""
        if type(other) is not type(self):
            return False
        assert isinstance(other, MarkupNode)
        if not self._same_data(other):
            return False
        if len(self.children) != len(other.children):
            return False
        return all(a.structurally_equals(b) for a, b in zip(self.children, other.children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MarkupNode):
            return NotImplemented
        return self.structurally_equals(other)

    __hash__ = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Concrete nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class _LeafNode(MarkupNode):
    children: Sequence[MarkupNode] = field(default=(), init=False, repr=False)

    def _replace_children(self, children: tuple[MarkupNode, ...]) -> MarkupNode:
        if children:
            raise ValueError(f"{type(self).__name__} cannot have children")
        return self


@dataclass(frozen=True, eq=False)
class TextNode(_LeafNode):
    text: str

    def _same_data(self, other: MarkupNode) -> bool:
        return isinstance(other, TextNode) and self.text == other.text


@dataclass(frozen=True, eq=False)
class ErrorNode(_LeafNode):
    """A construct the parser could not validate, kept as its literal source."""

    text: str

    def _same_data(self, other: MarkupNode) -> bool:
        return isinstance(other, ErrorNode) and self.text == other.text


@dataclass(frozen=True, eq=False)
class SequenceNode(MarkupNode):
    children: Sequence[MarkupNode] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True, eq=False)
class TagNode(MarkupNode):
    definition: TagDefinition
    # Attribute name -> resolved value; defaults are filled in on creation
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: Sequence[MarkupNode] = ()

    def __post_init__(self) -> None:
        attributes = self.definition.default_attributes()
        if self.definition.content_as_attribute:
            attributes[CONTENT_ATTRIBUTE] = ""
        attributes.update(self.attributes)
        object.__setattr__(self, "attributes", attributes)

        children = tuple(self.children)
        if children and self.definition.content_as_attribute:
            raise ValueError(f"Tag '{self.definition.name}' takes its content as an attribute")
        object.__setattr__(self, "children", children)

    @property
    def name(self) -> str:
        return self.definition.name

    def _replace_children(self, children: tuple[MarkupNode, ...]) -> MarkupNode:
        return TagNode(self.definition, dict(self.attributes), children)

    def _same_data(self, other: MarkupNode) -> bool:
        return (
            isinstance(other, TagNode)
            and self.definition == other.definition
            and dict(self.attributes) == dict(other.attributes)
        )

"""BBCode grammar, syntax tree, parsing and rendering."""

from forum_markup.core.bbcode.html_visitor import HtmlRenderer
from forum_markup.core.bbcode.markup_visitor import MarkupRenderer
from forum_markup.core.bbcode.nodes import (
    ErrorNode,
    MarkupNode,
    RenderTarget,
    SequenceNode,
    TagNode,
    TextNode,
)
from forum_markup.core.bbcode.parser import parse
from forum_markup.core.bbcode.plaintext_visitor import PlainTextRenderer
from forum_markup.core.bbcode.tags import (
    SMILEY_TAG,
    TAGS,
    AttributeDefinition,
    TagDefinition,
    get_tag,
    is_safe_url,
)
from forum_markup.core.bbcode.visitor import RenderVisitor, SyntaxTreeVisitor

__all__ = [
    # Grammar
    "AttributeDefinition",
    "TagDefinition",
    "TAGS",
    "SMILEY_TAG",
    "get_tag",
    "is_safe_url",
    # Nodes
    "MarkupNode",
    "TextNode",
    "TagNode",
    "SequenceNode",
    "ErrorNode",
    "RenderTarget",
    # Parser
    "parse",
    # Visitors
    "SyntaxTreeVisitor",
    "RenderVisitor",
    "HtmlRenderer",
    "MarkupRenderer",
    "PlainTextRenderer",
]

"""Pre- and post-processing passes over a message body.

Each pass is a small pure function so it can be tested on its own; the
pipeline decides the order they run in.
"""

from __future__ import annotations

import re
from html import unescape

from forum_markup.core.exceptions import EmptyBodyError
from forum_markup.core.processing.smileys import strip_placeholder_sentinels

NO_TEXT_PREVIEW = "No text"
ELLIPSIS = "…"

_ANCHOR_OPEN = re.compile(r"<a ")
_QUOTE_OPEN = re.compile(r"(\[quote\]|<blockquote>)[\r\n]+")
_QUOTE_CLOSE = re.compile(r"[\r\n]*(\[/quote\]|</blockquote>)[\r\n]*")

# Innermost quote block: no other opening quote between its tags
_QUOTE_BLOCK = re.compile(
    r"(?:<blockquote[^>]*>(?:(?!<blockquote).)*?</blockquote>"
    r"|\[quote[^\]]*\](?:(?!\[quote).)*?\[/quote\])\n*",
    re.DOTALL,
)
_MARKUP = re.compile(r"<[^>]+>|\[[^\]]+\]")


# ---------------------------------------------------------------------------
# Pre-clean
# ---------------------------------------------------------------------------


def force_new_window_anchors(text: str) -> str:
    """Make every raw ``<a`` anchor open in a new window."""
    return _ANCHOR_OPEN.sub("<a target='_blank' ", text)


def collapse_quote_padding(text: str) -> str:
    """Drop blank lines right inside quote blocks and right after them."""
    text = _QUOTE_OPEN.sub(r"\1", text)
    return _QUOTE_CLOSE.sub(r"\1", text)


def replace_heart_smiley(text: str) -> str:
    # Must run right before smiley tokenization so "<3" is never escaped first
    return text.replace("*heartsmiley*", "<3")


def pre_clean(body: str | None) -> str:
    """Return the display body a message starts from.

    Raises :class:`EmptyBodyError` when nothing is left after trimming.
    """
    text = strip_placeholder_sentinels((body or "").strip())
    if not text:
        raise EmptyBodyError()

    text = force_new_window_anchors(text)
    text = collapse_quote_padding(text)
    return replace_heart_smiley(text)


# ---------------------------------------------------------------------------
# Previews
# ---------------------------------------------------------------------------


def strip_quotes(text: str) -> str:
    """Remove quote blocks, innermost first so nested quotes go entirely."""
    while True:
        stripped = _QUOTE_BLOCK.sub("", text)
        if stripped == text:
            return stripped
        text = stripped


def get_message_preview(body: str, preview_length: int, multiline: bool = False) -> str:
    """Return a plain text preview of a rendered body.

    Quote blocks and any tag or bracket syntax are dropped.  Single-line
    previews keep only the first line.  Text longer than *preview_length*
    is cut to that many characters followed by an ellipsis.
    """
    preview = strip_quotes(body)
    preview = _MARKUP.sub("", preview)
    preview = unescape(preview).strip()

    if not multiline:
        preview = preview.split("\n", 1)[0].strip()

    if len(preview) > preview_length:
        return preview[:preview_length] + ELLIPSIS
    if not preview:
        return NO_TEXT_PREVIEW
    return preview

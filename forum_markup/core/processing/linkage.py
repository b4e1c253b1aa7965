"""Placing a processed message into its topic."""

from __future__ import annotations

import math
from datetime import date
from typing import NamedTuple, Sequence

from forum_markup.core.exceptions import OrphanReferenceError
from forum_markup.core.models.message import MessageRecord
from forum_markup.core.processing.ports import MessageLookup


class ReplyLinkage(NamedTuple):
    # Topic starter the new message belongs to (0 for a new topic)
    parent_id: int
    # Message being replied to inside the topic (0 when replying to the starter)
    reply_id: int


async def resolve_reply_linkage(
    reply_to: MessageRecord | None,
    messages: MessageLookup,
) -> ReplyLinkage:
    """Work out where a new message hangs when it replies to *reply_to*.

    Replying to a topic starter attaches directly to it.  Replying to a
    reply attaches to that reply's topic starter, which must still exist.

    Raises:
        OrphanReferenceError: If the topic starter of *reply_to* is gone.
    """
    if reply_to is None:
        return ReplyLinkage(0, 0)

    if reply_to.parent_id == 0:
        return ReplyLinkage(reply_to.id, 0)

    parent = await messages.get_message(reply_to.parent_id)
    if parent is None:
        raise OrphanReferenceError(reply_to.id, reply_to.parent_id)

    return ReplyLinkage(parent.id, reply_to.id)


def quote_deleted_message(
    reply_body: str,
    deleted_body: str,
    deleted_by: str,
    deleted_on: date | None = None,
) -> str:
    """Prefix *reply_body* with a quote of the message it answered."""
    deleted_on = deleted_on or date.today()
    stamp = f"{deleted_on:%B} {deleted_on.day:02d}, {deleted_on.year}"
    return f"[quote]{deleted_body}\nMessage deleted by {deleted_by} on {stamp}[/quote]{reply_body}"


def get_page_number(message_id: int, message_ids: Sequence[int], messages_per_page: int) -> int:
    """Return the 1-based page holding *message_id*, or 0 if it is not listed."""
    if messages_per_page <= 0:
        raise ValueError("messages_per_page must be positive")
    try:
        index = list(message_ids).index(message_id)
    except ValueError:
        return 0
    return math.ceil((index + 1) / messages_per_page)

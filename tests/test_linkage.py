"""Tests for reply linkage, deleted-message quoting and page numbers."""

from __future__ import annotations

from datetime import date

import pytest

from forum_markup.core.exceptions import OrphanReferenceError
from forum_markup.core.models.message import MessageRecord
from forum_markup.core.processing.linkage import (
    ReplyLinkage,
    get_page_number,
    quote_deleted_message,
    resolve_reply_linkage,
)
from forum_markup.core.processing.ports import InMemoryMessageLookup


class TestResolveReplyLinkage:
    async def test_new_topic(self):
        assert await resolve_reply_linkage(None, InMemoryMessageLookup()) == ReplyLinkage(0, 0)

    async def test_reply_to_topic_starter(self):
        starter = MessageRecord(id=10)
        linkage = await resolve_reply_linkage(starter, InMemoryMessageLookup([starter]))
        assert linkage == ReplyLinkage(parent_id=10, reply_id=0)

    async def test_reply_to_reply(self):
        starter = MessageRecord(id=10)
        reply = MessageRecord(id=11, parent_id=10)
        linkage = await resolve_reply_linkage(reply, InMemoryMessageLookup([starter, reply]))
        assert linkage.parent_id == 10
        assert linkage.reply_id == 11

    async def test_orphan(self):
        reply = MessageRecord(id=11, parent_id=10)
        with pytest.raises(OrphanReferenceError) as exc_info:
            await resolve_reply_linkage(reply, InMemoryMessageLookup([reply]))

        error = exc_info.value
        assert error.is_fatal is True
        assert error.message_id == 11
        assert error.parent_id == 10
        assert str(error) == "Orphan message found with ID 11. Unable to load parent with ID 10."


class TestQuoteDeletedMessage:
    def test_format(self):
        body = quote_deleted_message("my reply", "old text", "Moderator", date(2024, 3, 5))
        assert body == "[quote]old text\nMessage deleted by Moderator on March 05, 2024[/quote]my reply"

    def test_defaults_to_today(self):
        body = quote_deleted_message("r", "d", "Mod")
        assert str(date.today().year) in body


class TestGetPageNumber:
    @pytest.mark.parametrize(
        "message_id, expected",
        [(1, 1), (3, 1), (4, 2), (7, 3), (9, 3)],
    )
    def test_pages(self, message_id, expected):
        assert get_page_number(message_id, list(range(1, 10)), 3) == expected

    def test_missing(self):
        assert get_page_number(42, [1, 2, 3], 3) == 0

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            get_page_number(1, [1], 0)

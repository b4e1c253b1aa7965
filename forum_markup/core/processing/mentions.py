"""Mention scanning."""

from __future__ import annotations

import logging
import re
from html import unescape
from itertools import islice

from forum_markup.core.models.user import User
from forum_markup.core.processing.links import iter_text_matches
from forum_markup.core.processing.options import ProcessingOptions
from forum_markup.core.processing.ports import UserDirectory

logger = logging.getLogger(__name__)

# "@token" at the start of the body or after whitespace or a closing tag
_MENTION_PATTERN = re.compile(r"(?<![^\s>])@([^\s<]+)")


class MentionScanner:
    """Resolves ``@name`` mentions in a rendered body to user ids."""

    def __init__(self, users: UserDirectory, options: ProcessingOptions | None = None) -> None:
        self._users = users
        self._options = options or ProcessingOptions()

    async def resolve(self, token: str) -> User | None:
        """Exact display name first, then the first login name containing *token*."""
        user = await self._users.find_by_display_name(token)
        if user is None:
            user = await self._users.find_by_user_name_fragment(token)
        return user

    async def scan(self, display_body: str, author_id: str | None = None) -> list[str]:
        user_ids: list[str] = []

        mentions = iter_text_matches(_MENTION_PATTERN, display_body)
        matches = islice(mentions, self._options.max_mentions)
        for m in matches:
            token = unescape(m.group(1))
            user = await self.resolve(token)
            if user is None:
                logger.debug("No user matches mention '@%s'", token)
                continue
            if user.id == author_id or user.id in user_ids:
                continue
            user_ids.append(user.id)

        return user_ids

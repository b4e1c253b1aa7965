"""Ports (interfaces) the pipeline reads from.

Storage lives outside the pipeline.  These protocols define the minimal
lookups a stage needs so the same pipeline runs against a database, a cache
or the in-memory implementations below.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from forum_markup.core.models.message import MessageRecord
from forum_markup.core.models.smiley import Smiley
from forum_markup.core.models.user import User


class SmileyRepository(Protocol):
    """Ordered smiley table used by the tokenize and resolve stages."""

    async def get_smileys(self) -> list[Smiley]:
        ...


class UserDirectory(Protocol):
    """User lookups used by the mention scan."""

    async def find_by_display_name(self, display_name: str) -> User | None:
        """Exact, case-insensitive display name match."""
        ...

    async def find_by_user_name_fragment(self, fragment: str) -> User | None:
        """First user whose login name contains *fragment*, case-insensitive."""
        ...


class MessageLookup(Protocol):
    """Message lookups used when linking a reply into its topic."""

    async def get_message(self, message_id: int) -> MessageRecord | None:
        ...


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------


class InMemorySmileyRepository:
    def __init__(self, smileys: Iterable[Smiley] = ()) -> None:
        self._smileys = [s for s in smileys if s.code]

    async def get_smileys(self) -> list[Smiley]:
        return list(self._smileys)


class InMemoryUserDirectory:
    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users = list(users)

    async def find_by_display_name(self, display_name: str) -> User | None:
        needle = display_name.lower()
        for user in self._users:
            if user.display_name.lower() == needle:
                return user
        return None

    async def find_by_user_name_fragment(self, fragment: str) -> User | None:
        needle = fragment.lower()
        for user in self._users:
            if needle in user.user_name.lower():
                return user
        return None


class InMemoryMessageLookup:
    def __init__(self, messages: Iterable[MessageRecord] = ()) -> None:
        self._messages = {m.id: m for m in messages}

    async def get_message(self, message_id: int) -> MessageRecord | None:
        return self._messages.get(message_id)

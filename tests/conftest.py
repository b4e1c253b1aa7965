"""Shared fixtures: in-memory collaborators and a fake page fetcher."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from forum_markup.core.models.message import RemotePageDetails
from forum_markup.core.models.smiley import Smiley
from forum_markup.core.models.user import User
from forum_markup.core.processing.links import LinkEnricher
from forum_markup.core.processing.options import ProcessingOptions
from forum_markup.core.processing.pipeline import MessageProcessor
from forum_markup.core.processing.ports import InMemorySmileyRepository, InMemoryUserDirectory


# ---------------------------------------------------------------------------
# Fake fetcher
# ---------------------------------------------------------------------------


class FakePageFetcher:
    """Duck-typed stand-in for RemotePageFetcher that never touches the network."""

    def __init__(self, cards: dict[str, str] | None = None, title: str = "Page Title") -> None:
        self._cards = cards or {}
        self._title = title
        self.fetch_details = AsyncMock(side_effect=self._details)
        self.close = AsyncMock()

    def _details(self, url: str) -> RemotePageDetails:
        return RemotePageDetails(url=url, title=self._title, card=self._cards.get(url))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def smileys() -> list[Smiley]:
    return [
        Smiley(code=":)", path="/smileys/smile.png"),
        Smiley(code="<3", path="/smileys/heart.png"),
    ]


@pytest.fixture
def users() -> list[User]:
    return [
        User(id="u-alice", user_name="alice_w", display_name="Alice"),
        User(id="u-bob", user_name="bobby_tables", display_name="Bob"),
    ]


@pytest.fixture
def fetcher() -> FakePageFetcher:
    return FakePageFetcher()


@pytest.fixture
def options() -> ProcessingOptions:
    return ProcessingOptions()


@pytest.fixture
def processor(smileys, users, fetcher, options) -> MessageProcessor:
    return MessageProcessor(
        InMemorySmileyRepository(smileys),
        InMemoryUserDirectory(users),
        enricher=LinkEnricher(fetcher, options),
        options=options,
    )

"""Processed message state and related models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, InstanceOf

from forum_markup.core.bbcode.nodes import MarkupNode


class ProcessingStage(Enum):
    RAW = "raw"
    PRE_CLEAN = "pre_clean"
    SMILEY_TOKENIZE = "smiley_tokenize"
    PARSED = "parsed"
    SMILEY_RESOLVE = "smiley_resolve"
    URL_ENRICH = "url_enrich"
    MENTION_SCAN = "mention_scan"
    POST_CLEAN = "post_clean"
    DONE = "done"


class ProcessedMessage(BaseModel):
    """Intermediate state threaded through the pipeline.

    Created from the raw body, mutated by each stage in turn and handed back
    to the caller once it reaches :attr:`ProcessingStage.DONE`.
    """

    original_body: str
    display_body: str
    # Rich link previews, in order of discovery
    cards: list[str] = Field(default_factory=list)
    mentioned_users: list[str] = Field(default_factory=list)
    short_preview: str = ""
    long_preview: str = ""
    tree: InstanceOf[MarkupNode] | None = Field(default=None, exclude=True)
    stage: ProcessingStage = ProcessingStage.RAW

    @property
    def cards_html(self) -> str:
        return "".join(self.cards)

    def add_mentioned_user(self, user_id: str) -> None:
        if user_id not in self.mentioned_users:
            self.mentioned_users.append(user_id)


class RemotePageDetails(BaseModel):
    model_config = {"frozen": True}

    url: str
    title: str
    card: str | None = None


class MessageRecord(BaseModel):
    """The stored fields of a message needed to link a reply into a topic."""

    model_config = {"frozen": True}

    id: int
    # 0 for a topic starter
    parent_id: int = 0

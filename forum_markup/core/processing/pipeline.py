"""Message processing pipeline.

A raw post body goes through a fixed sequence of stages, each of which
updates one :class:`ProcessedMessage`:

    PRE_CLEAN -> SMILEY_TOKENIZE -> PARSED -> SMILEY_RESOLVE
        -> URL_ENRICH -> MENTION_SCAN -> POST_CLEAN -> DONE

Smileys are tokenized before parsing so the parser never sees their codes.
Links and mentions are scanned only on the rendered HTML.
"""

from __future__ import annotations

import logging

from forum_markup.core.bbcode.parser import parse
from forum_markup.core.models.message import ProcessedMessage, ProcessingStage
from forum_markup.core.processing.housekeeping import get_message_preview, pre_clean
from forum_markup.core.processing.links import LinkEnricher
from forum_markup.core.processing.mentions import MentionScanner
from forum_markup.core.processing.options import ProcessingOptions
from forum_markup.core.processing.ports import SmileyRepository, UserDirectory
from forum_markup.core.processing.smileys import SmileyResolver, tokenize_smileys

logger = logging.getLogger(__name__)

STAGE_ORDER: tuple[ProcessingStage, ...] = (
    ProcessingStage.RAW,
    ProcessingStage.PRE_CLEAN,
    ProcessingStage.SMILEY_TOKENIZE,
    ProcessingStage.PARSED,
    ProcessingStage.SMILEY_RESOLVE,
    ProcessingStage.URL_ENRICH,
    ProcessingStage.MENTION_SCAN,
    ProcessingStage.POST_CLEAN,
    ProcessingStage.DONE,
)


class MessageProcessor:
    """Turns raw post bodies into display HTML, cards, mentions and previews."""

    def __init__(
        self,
        smileys: SmileyRepository,
        users: UserDirectory,
        enricher: LinkEnricher | None = None,
        options: ProcessingOptions | None = None,
    ) -> None:
        self._options = options or ProcessingOptions()
        self._smileys = smileys
        self._enricher = enricher or LinkEnricher(options=self._options)
        self._mentions = MentionScanner(users, self._options)

    async def close(self) -> None:
        await self._enricher.close()

    async def __aenter__(self) -> MessageProcessor:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    @staticmethod
    def _advance(message: ProcessedMessage, stage: ProcessingStage) -> None:
        logger.debug("Stage %s -> %s", message.stage.name, stage.name)
        message.stage = stage

    async def process(self, body: str | None, author_id: str | None = None) -> ProcessedMessage:
        """Run every stage over *body*.

        Raises:
            EmptyBodyError: If *body* is empty after trimming.
        """
        message = ProcessedMessage(original_body=body or "", display_body=body or "")

        self._advance(message, ProcessingStage.PRE_CLEAN)
        message.display_body = pre_clean(body)

        self._advance(message, ProcessingStage.SMILEY_TOKENIZE)
        smileys = await self._smileys.get_smileys()
        message.display_body = tokenize_smileys(message.display_body, smileys)

        self._advance(message, ProcessingStage.PARSED)
        message.tree = parse(message.display_body)
        message.display_body = message.tree.to_html()

        self._advance(message, ProcessingStage.SMILEY_RESOLVE)
        message.tree = message.tree.accept(SmileyResolver(smileys))
        message.display_body = message.tree.to_html()

        self._advance(message, ProcessingStage.URL_ENRICH)
        message.display_body, cards = await self._enricher.enrich(message.display_body)
        message.cards.extend(cards)

        self._advance(message, ProcessingStage.MENTION_SCAN)
        for user_id in await self._mentions.scan(message.display_body, author_id):
            message.add_mentioned_user(user_id)

        self._advance(message, ProcessingStage.POST_CLEAN)
        message.display_body = message.display_body.strip()
        message.short_preview = get_message_preview(
            message.display_body, self._options.short_preview_length
        )
        message.long_preview = get_message_preview(
            message.display_body, self._options.long_preview_length, multiline=True
        )

        self._advance(message, ProcessingStage.DONE)
        return message

"""Link enrichment.

Bare links in the rendered body become anchors, and each one may add a
card (embedded player or page preview) shown below the message.
"""

from __future__ import annotations

import asyncio
import logging
import re
from enum import Enum
from html import escape, unescape
from itertools import islice
from typing import Iterator

from forum_markup.core.models.message import RemotePageDetails
from forum_markup.core.processing.cards import render_video_card, render_youtube_card
from forum_markup.core.processing.options import ProcessingOptions
from forum_markup.core.processing.remote import RemotePageFetcher

logger = logging.getLogger(__name__)

# A link at the start of a line or after a space; stops at whitespace and
# at the next HTML tag.
_URL_PATTERN = re.compile(r"(^| )(https?://[^\s<]+)", re.MULTILINE)

_YOUTUBE_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.)?"
    r"(?:(?:youtube\.com/watch\?[^?]*v=|youtu\.be/)([\w\-]+))"
    r"(?:[^\s?]+)?"
)
_VIDEO_PATTERN = re.compile(r"\.(?:gifv|webm|mp4)$", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")


class LinkKind(Enum):
    YOUTUBE = "youtube"
    VIDEO = "video"
    PAGE = "page"


def iter_text_matches(pattern: re.Pattern[str], html: str) -> Iterator[re.Match[str]]:
    """Yield matches of *pattern* in the text of *html*, never inside a tag.

    Line anchors and lookbehinds still see the whole string, so a segment
    that starts right after a tag is not treated as a line start.
    """
    pos = 0
    for tag in _HTML_TAG.finditer(html):
        yield from pattern.finditer(html, pos, tag.start())
        pos = tag.end()
    yield from pattern.finditer(html, pos)


def classify(url: str) -> LinkKind:
    if _YOUTUBE_PATTERN.match(url):
        return LinkKind.YOUTUBE
    if _VIDEO_PATTERN.search(url):
        return LinkKind.VIDEO
    return LinkKind.PAGE


class LinkEnricher:
    """Replaces bare links in an HTML body with anchors and collects cards.

    At most ``options.max_enrichments`` links are processed per body; later
    ones stay as they are.  Remote fetches run concurrently.
    """

    def __init__(
        self,
        fetcher: RemotePageFetcher | None = None,
        options: ProcessingOptions | None = None,
    ) -> None:
        self._options = options or ProcessingOptions()
        self._fetcher = fetcher or RemotePageFetcher(self._options)

    async def close(self) -> None:
        await self._fetcher.close()

    async def enrich(self, display_body: str) -> tuple[str, list[str]]:
        links = iter_text_matches(_URL_PATTERN, display_body)
        matches = list(islice(links, self._options.max_enrichments))
        if not matches:
            return display_body, []

        results = await asyncio.gather(
            *(self._details(unescape(m.group(2))) for m in matches)
        )

        # Splice each anchor in at its own match position
        pieces: list[str] = []
        last = 0
        for m, details in zip(matches, results):
            pieces.append(display_body[last : m.start(2)])
            pieces.append(
                f'<a target="_blank" href="{escape(details.url)}">{escape(details.title)}</a>'
            )
            last = m.end(2)
        pieces.append(display_body[last:])

        cards = [details.card for details in results if details.card]
        logger.debug("Enriched %d link(s), %d card(s)", len(matches), len(cards))
        return "".join(pieces), cards

    async def _details(self, url: str) -> RemotePageDetails:
        kind = classify(url)

        if kind is LinkKind.YOUTUBE:
            video_id = _YOUTUBE_PATTERN.match(url).group(1)  # type: ignore[union-attr]
            return RemotePageDetails(url=url, title=url, card=render_youtube_card(video_id))

        if kind is LinkKind.VIDEO:
            # Players get the webm and mp4 renditions of the same base name
            base_url = _VIDEO_PATTERN.sub("", url)
            return RemotePageDetails(url=url, title=url, card=render_video_card(base_url))

        if not self._options.fetch_remote:
            return RemotePageDetails(url=url, title=url)

        return await self._fetcher.fetch_details(url)

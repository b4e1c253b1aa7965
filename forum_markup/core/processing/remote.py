"""Remote page metadata for link cards."""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import urldefrag

import httpx
from bs4 import BeautifulSoup

from forum_markup.core.exceptions import RemoteFetchError
from forum_markup.core.models.message import RemotePageDetails
from forum_markup.core.processing.cards import render_link_card
from forum_markup.core.processing.options import ProcessingOptions
from forum_markup.core.utils.http import create_async_client

logger = logging.getLogger(__name__)

_HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


def _meta_content(soup: BeautifulSoup, prop: str) -> str | None:
    tag = soup.find("meta", attrs={"property": prop}) or soup.find("meta", attrs={"name": prop})
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


class RemotePageFetcher:
    """Loads a linked page and turns its Open Graph metadata into a card.

    :meth:`fetch_details` never raises: any failure yields the URL as the
    title and no card.
    """

    def __init__(
        self,
        options: ProcessingOptions | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._options = options or ProcessingOptions()
        self._external_client = client
        self._owned_client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._external_client is not None:
            return self._external_client
        if self._owned_client is None or self._owned_client.is_closed:
            self._owned_client = create_async_client(self._options)
        return self._owned_client

    async def close(self) -> None:
        """Close the owned HTTP client if one was created."""
        if self._owned_client is not None and not self._owned_client.is_closed:
            await self._owned_client.aclose()
            self._owned_client = None

    async def __aenter__(self) -> RemotePageFetcher:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- fetching --

    async def fetch_details(self, url: str) -> RemotePageDetails:
        """Return the details for *url*, an unescaped absolute http(s) URL."""
        target, _ = urldefrag(url)
        try:
            return await asyncio.wait_for(self._load(url, target), timeout=self._options.fetch_timeout)
        except asyncio.TimeoutError:
            logger.info("Timed out fetching %s after %.1fs", target, self._options.fetch_timeout)
        except RemoteFetchError as e:
            logger.info("Could not fetch %s: %s", target, e)
        return RemotePageDetails(url=url, title=url)

    async def _load(self, url: str, target: str) -> RemotePageDetails:
        client = self._get_client()
        # Malformed hosts surface as ValueError (IDNA errors included)
        try:
            response = await client.get(target)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise RemoteFetchError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise RemoteFetchError(f"HTTP {response.status_code}")

        content_type = response.headers.get("content-type", "").split(";", 1)[0].strip().lower()
        if content_type not in _HTML_CONTENT_TYPES:
            raise RemoteFetchError(f"Unsupported content type '{content_type}'")

        try:
            text = response.text
        except (LookupError, UnicodeDecodeError) as e:
            raise RemoteFetchError(f"Undecodable body: {e}") from e

        return self.parse_details(url, text)

    @staticmethod
    def parse_details(url: str, text: str) -> RemotePageDetails:
        """Extract title and card from an HTML document."""
        soup = BeautifulSoup(text, "html.parser")

        title = _meta_content(soup, "og:title")
        if title is None and soup.title is not None and soup.title.string:
            title = soup.title.string.strip() or None
        title = title or url

        description = _meta_content(soup, "og:description")
        card = None
        if description is not None:
            card = render_link_card(
                url=url,
                title=title,
                description=description,
                image=_meta_content(soup, "og:image"),
                site_name=_meta_content(soup, "og:site_name"),
            )
        return RemotePageDetails(url=url, title=title, card=card)

"""Tests for link classification and enrichment."""

from __future__ import annotations

import pytest

from conftest import FakePageFetcher
from forum_markup.core.processing.links import LinkEnricher, LinkKind, classify
from forum_markup.core.processing.options import ProcessingOptions


class TestClassify:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "http://youtube.com/watch?feature=share&v=abc-123",
            "https://youtu.be/dQw4w9WgXcQ",
        ],
    )
    def test_youtube(self, url):
        assert classify(url) is LinkKind.YOUTUBE

    @pytest.mark.parametrize(
        "url",
        ["http://i.example.com/a.gifv", "https://x.com/clip.webm", "https://x.com/CLIP.MP4"],
    )
    def test_video(self, url):
        assert classify(url) is LinkKind.VIDEO

    @pytest.mark.parametrize(
        "url",
        ["http://example.com", "http://example.com/a.mp4?x=1", "https://youtube.com/channel/x"],
    )
    def test_page(self, url):
        assert classify(url) is LinkKind.PAGE


class TestLinkEnricher:
    async def test_page_link(self, fetcher):
        body, cards = await LinkEnricher(fetcher).enrich("see http://example.com/a")
        assert body == 'see <a target="_blank" href="http://example.com/a">Page Title</a>'
        assert cards == []
        fetcher.fetch_details.assert_awaited_once_with("http://example.com/a")

    async def test_no_links(self, fetcher):
        body, cards = await LinkEnricher(fetcher).enrich("nothing here")
        assert body == "nothing here"
        assert cards == []
        fetcher.fetch_details.assert_not_awaited()

    async def test_link_at_line_start(self, fetcher):
        body, _ = await LinkEnricher(fetcher).enrich("first\nhttp://example.com/b")
        assert body == 'first\n<a target="_blank" href="http://example.com/b">Page Title</a>'

    async def test_link_stops_at_tag(self, fetcher):
        body, _ = await LinkEnricher(fetcher).enrich("x http://example.com</span>")
        assert body == 'x <a target="_blank" href="http://example.com">Page Title</a></span>'

    async def test_existing_anchor_untouched(self, fetcher):
        html = '<a class="bbc-anchor" href="http://a.com" target="_blank">http://a.com</a>'
        body, _ = await LinkEnricher(fetcher).enrich(html)
        assert body == html
        fetcher.fetch_details.assert_not_awaited()

    async def test_link_glued_to_word_untouched(self, fetcher):
        body, _ = await LinkEnricher(fetcher).enrich("xhttp://example.com")
        assert body == "xhttp://example.com"

    async def test_link_inside_attribute_untouched(self, fetcher):
        html = '<a class="bbc-anchor" href="x http://evil.com" target="_blank">click</a>'
        body, cards = await LinkEnricher(fetcher).enrich(html)
        assert body == html
        assert cards == []
        fetcher.fetch_details.assert_not_awaited()

    async def test_link_after_tag_with_spaced_attribute(self, fetcher):
        html = '<a href="a http://evil.com">x</a> http://example.com'
        body, _ = await LinkEnricher(fetcher).enrich(html)
        assert body == (
            '<a href="a http://evil.com">x</a> '
            '<a target="_blank" href="http://example.com">Page Title</a>'
        )
        fetcher.fetch_details.assert_awaited_once_with("http://example.com")

    async def test_escaped_url_unescaped_for_fetch(self, fetcher):
        body, _ = await LinkEnricher(fetcher).enrich("http://a.com/?x=1&amp;y=2")
        fetcher.fetch_details.assert_awaited_once_with("http://a.com/?x=1&y=2")
        assert 'href="http://a.com/?x=1&amp;y=2"' in body

    async def test_title_escaped(self):
        fetcher = FakePageFetcher(title="<b>bold</b>")
        body, _ = await LinkEnricher(fetcher).enrich("http://example.com")
        assert body.endswith(">&lt;b&gt;bold&lt;/b&gt;</a>")

    async def test_cards_in_discovery_order(self):
        fetcher = FakePageFetcher(cards={"http://a.com": "<card a>", "http://b.com": "<card b>"})
        _, cards = await LinkEnricher(fetcher).enrich("http://b.com and http://x.com and http://a.com")
        assert cards == ["<card b>", "<card a>"]

    async def test_repeated_url_replaced_in_place(self, fetcher):
        body, _ = await LinkEnricher(fetcher).enrich("http://a.com http://a.com")
        anchor = '<a target="_blank" href="http://a.com">Page Title</a>'
        assert body == f"{anchor} {anchor}"
        assert fetcher.fetch_details.await_count == 2

    async def test_youtube_card(self, fetcher):
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        body, cards = await LinkEnricher(fetcher).enrich(url)
        assert body == f'<a target="_blank" href="{url}">{url}</a>'
        assert len(cards) == 1
        assert cards[0].startswith('<div class="embedded-video"><iframe')
        assert 'src="https://www.youtube.com/embed/dQw4w9WgXcQ"' in cards[0]
        fetcher.fetch_details.assert_not_awaited()

    async def test_video_card(self, fetcher):
        body, cards = await LinkEnricher(fetcher).enrich("look http://i.example.com/clip.gifv")
        assert '<source src="http://i.example.com/clip.webm" type="video/webm" />' in cards[0]
        assert '<source src="http://i.example.com/clip.mp4" type="video/mp4" />' in cards[0]
        assert "<video autoplay loop>" in cards[0]
        assert ">http://i.example.com/clip.gifv</a>" in body
        fetcher.fetch_details.assert_not_awaited()

    async def test_fetch_disabled(self, fetcher):
        enricher = LinkEnricher(fetcher, ProcessingOptions(fetch_remote=False))
        body, cards = await enricher.enrich("http://example.com")
        assert body == '<a target="_blank" href="http://example.com">http://example.com</a>'
        assert cards == []
        fetcher.fetch_details.assert_not_awaited()

    async def test_enrichment_cap(self, fetcher):
        urls = [f"http://example.com/{i}" for i in range(50)]
        body, _ = await LinkEnricher(fetcher).enrich(" ".join(urls))

        assert fetcher.fetch_details.await_count == 10
        assert body.count("<a ") == 10
        assert body.endswith(" " + " ".join(urls[10:]))

    async def test_cap_counts_embeds(self, fetcher):
        urls = ["https://youtu.be/abc"] * 10 + ["http://example.com/late"]
        body, cards = await LinkEnricher(fetcher).enrich(" ".join(urls))
        assert len(cards) == 10
        assert body.endswith(" http://example.com/late")
        fetcher.fetch_details.assert_not_awaited()

    async def test_custom_cap(self, fetcher):
        enricher = LinkEnricher(fetcher, ProcessingOptions(max_enrichments=2))
        await enricher.enrich("http://a.com http://b.com http://c.com")
        assert fetcher.fetch_details.await_count == 2

    async def test_close_closes_fetcher(self, fetcher):
        await LinkEnricher(fetcher).close()
        fetcher.close.assert_awaited_once()

from datetime import datetime

import httpx
import pytest

from game_news.classify.keywords import is_game_related_keywords
from game_news.config import Settings
from game_news.ingest.factory import create_source
from game_news.ingest.mock_source import MockSource
from game_news.ingest.rss_source import RssSource, html_to_text
from game_news.ingest.source import PLACEHOLDER_CONTENT
from game_news.models import make_article_id
from game_news.summarize.extractive import summarize_extractive

FEED_URL = "https://feeds.example.com/games.xml"

FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Pixel Press</title>
    <link>https://pixel.example.com</link>
    <item>
      <title>Console sales surge</title>
      <link>https://pixel.example.com/console-sales</link>
      <description>&lt;p&gt;Console sales rose sharply. Analysts expected it. More details follow.&lt;/p&gt;</description>
      <pubDate>Tue, 07 May 2024 10:30:00 +0200</pubDate>
      <enclosure url="https://pixel.example.com/console.jpg" type="image/jpeg" length="100"/>
    </item>
    <item>
      <title>Quarterly earnings call</title>
      <link>https://pixel.example.com/earnings</link>
      <description>Revenue figures for the quarter.</description>
      <pubDate>Mon, 06 May 2024 08:00:00 GMT</pubDate>
    </item>
    <item>
      <title></title>
      <link>https://pixel.example.com/untitled</link>
    </item>
  </channel>
</rss>
"""

PAGE = """<html><head><style>p { color: red; }</style></head>
<body><nav>Menu</nav><p>First paragraph of the story.</p><p>Second &amp; final paragraph.</p></body></html>"""


def make_client(routes):
    def handler(request: httpx.Request) -> httpx.Response:
        key = str(request.url)
        if key not in routes:
            return httpx.Response(404)
        status, body = routes[key]
        return httpx.Response(status, content=body if isinstance(body, bytes) else body.encode("utf-8"))

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestRssSource:
    def test_fetch_candidates_maps_feed_entries(self):
        source = RssSource(feeds=[FEED_URL], client=make_client({FEED_URL: (200, FEED)}))
        candidates = source.fetch_candidates()

        assert [c.title for c in candidates] == ["Console sales surge", "Quarterly earnings call"]
        first = candidates[0]
        assert first.id == make_article_id("https://pixel.example.com/console-sales")
        assert first.source == "Pixel Press"
        assert first.image_url == "https://pixel.example.com/console.jpg"
        assert first.published_at == datetime(2024, 5, 7, 8, 30)
        assert first.summary == "Console sales rose sharply. Analysts expected it."

    def test_topic_filter_drops_unrelated_entries(self):
        source = RssSource(feeds=[FEED_URL], topic_filter=True, client=make_client({FEED_URL: (200, FEED)}))
        assert [c.title for c in source.fetch_candidates()] == ["Console sales surge"]

    def test_failing_feed_degrades_to_empty(self):
        source = RssSource(feeds=[FEED_URL], client=make_client({FEED_URL: (500, b"")}))
        assert source.fetch_candidates() == []

    def test_one_failing_feed_does_not_hide_the_others(self):
        broken = "https://broken.example.com/feed"
        client = make_client({FEED_URL: (200, FEED), broken: (503, b"")})
        source = RssSource(feeds=[broken, FEED_URL], client=client)
        assert len(source.fetch_candidates()) == 2

    def test_fetch_content_extracts_paragraph_text(self):
        url = "https://pixel.example.com/console-sales"
        source = RssSource(feeds=[FEED_URL], client=make_client({url: (200, PAGE)}))
        assert source.fetch_content(url) == "First paragraph of the story.\n\nSecond & final paragraph."

    def test_fetch_content_falls_back_to_placeholder(self):
        url = "https://pixel.example.com/gone"
        source = RssSource(feeds=[FEED_URL], client=make_client({}))
        assert source.fetch_content(url) == PLACEHOLDER_CONTENT

    def test_fetch_content_times_out_to_placeholder(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        source = RssSource(feeds=[FEED_URL], client=httpx.Client(transport=httpx.MockTransport(handler)))
        assert source.fetch_content("https://slow.example.com/") == PLACEHOLDER_CONTENT


def test_html_to_text_without_paragraphs_uses_whole_page():
    assert html_to_text("<div>Just <b>text</b></div>") == "Just text"


def test_summarize_extractive_falls_back_to_title():
    assert summarize_extractive("Only a title", None) == "Only a title"
    assert summarize_extractive("T", "<p>One. Two. Three.</p>") == "One. Two."


def test_game_keywords():
    assert is_game_related_keywords("New esports league", None)
    assert not is_game_related_keywords("Quarterly earnings call", "Revenue figures for the quarter.")


@pytest.mark.parametrize(
    "ingest_source, expected",
    [("mock", MockSource), ("rss", RssSource)],
)
def test_create_source(ingest_source, expected):
    source = create_source(Settings(ingest_source=ingest_source, rss_feeds=f"{FEED_URL}, "))
    try:
        assert isinstance(source, expected)
        if isinstance(source, RssSource):
            assert source.feeds == [FEED_URL]
    finally:
        source.close()


def test_html_to_text_ignores_attribute_markup_and_comments():
    assert html_to_text('<p><img alt="1 > 0" src="x.png">Hello</p>') == "Hello"
    assert html_to_text("<!-- <p>tracking junk</p> --><p>Body</p>") == "Body"


def test_html_to_text_drops_scripts_inside_paragraphs():
    markup = "<p>Patch notes <script>track()</script>are live.</p><noscript><p>Enable JS</p></noscript>"
    assert html_to_text(markup) == "Patch notes are live."


def test_summarize_extractive_decodes_entities():
    assert summarize_extractive("T", "Tom &amp; Jerry return.<!-- ad -->") == "Tom & Jerry return."

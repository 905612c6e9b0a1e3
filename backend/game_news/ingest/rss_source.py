from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
import logging
import re
from typing import Iterable, List, Optional

import feedparser
import httpx

from ..classify.keywords import is_game_related_keywords
from ..models import ArticleBase, make_article_id, utcnow
from ..summarize.extractive import parse_html, summarize_extractive
from .rss_sources import DEFAULT_RSS_SOURCES
from .source import PLACEHOLDER_CONTENT, IngestionSource

logger = logging.getLogger(__name__)

USER_AGENT = "game-news/0.1 (feed reader; +httpx)"

MAX_CONTENT_CHARS = 20000


def _entry_datetime(entry) -> Optional[datetime]:
    """Publication time of a feed entry as naive UTC, or None.

    feedparser's parsed published/updated/created tuples win; otherwise the
    raw strings are tried as RFC 822 dates, then as ISO 8601 (a trailing
    ``Z`` is read as UTC).
    """
    for attr in ("published_parsed", "updated_parsed", "created_parsed"):
        val = entry.get(attr)
        if val:
            try:
                return datetime(*val[:6])
            except (TypeError, ValueError):
                pass
    for attr in ("published", "updated", "created"):
        s = entry.get(attr)
        if not s:
            continue
        try:
            dt = parsedate_to_datetime(s)
        except (TypeError, ValueError):
            dt = None
        if dt is None:
            try:
                dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
            except ValueError:
                continue
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
        return dt
    return None


def _entry_image(entry) -> Optional[str]:
    for attr in ("media_thumbnail", "media_content"):
        media = entry.get(attr) or []
        for item in media:
            if item.get("url"):
                return item["url"]
    for enclosure in entry.get("enclosures") or []:
        if (enclosure.get("type") or "").startswith("image/") and enclosure.get("href"):
            return enclosure["href"]
    return None


def html_to_text(markup: str) -> str:
    """Paragraph text of an HTML page; whole-page text when it has no <p> tags."""
    soup = parse_html(markup)
    blocks = soup.find_all("p") or [soup]
    lines = [re.sub(r"\s+", " ", block.get_text(" ", strip=True)) for block in blocks]
    return "\n\n".join(line for line in lines if line)


class RssSource(IngestionSource):
    """Candidate articles from RSS/Atom feeds, article bodies from the linked pages."""

    name = "rss"

    def __init__(
        self,
        feeds: Optional[Iterable[str]] = None,
        timeout: float = 10.0,
        topic_filter: bool = False,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.feeds = list(feeds or DEFAULT_RSS_SOURCES)
        self.topic_filter = topic_filter
        self._client = client or httpx.Client(headers={"User-Agent": USER_AGENT}, timeout=timeout, follow_redirects=True)

    def _parse_feed(self, url: str):
        try:
            r = self._client.get(url)
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("[ingest.rss] fetch error for %s: %s", url, e)
            return None
        parsed = feedparser.parse(r.content)
        if getattr(parsed, "bozo", 0):
            logger.info("[ingest.rss] feedparser bozo for %s: %s", url, getattr(parsed, "bozo_exception", ""))
        return parsed

    def fetch_candidates(self) -> List[ArticleBase]:
        candidates: List[ArticleBase] = []
        seen = set()
        for feed_url in self.feeds:
            parsed = self._parse_feed(feed_url)
            if parsed is None:
                continue
            source = parsed.feed.get("title") or feed_url
            for entry in parsed.entries:
                title = (entry.get("title") or "").strip()
                url = (entry.get("link") or "").strip()
                if not title or not url or url in seen:
                    continue
                description = entry.get("summary")
                if self.topic_filter and not is_game_related_keywords(title, description):
                    logger.debug("[ingest.filter] skipped title=%s", title[:80])
                    continue
                seen.add(url)
                candidates.append(
                    ArticleBase(
                        id=make_article_id(url),
                        title=title,
                        url=url,
                        image_url=_entry_image(entry),
                        summary=summarize_extractive(title, description),
                        source=source,
                        published_at=_entry_datetime(entry) or utcnow(),
                    )
                )
        logger.info("[ingest.rss] %d candidates from %d feeds", len(candidates), len(self.feeds))
        return candidates

    def fetch_content(self, url: str) -> str:
        try:
            r = self._client.get(url)
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("[ingest.rss] content fetch error for %s: %s", url, e)
            return PLACEHOLDER_CONTENT
        text = html_to_text(r.text)
        return text[:MAX_CONTENT_CHARS] or PLACEHOLDER_CONTENT

    def close(self) -> None:
        self._client.close()

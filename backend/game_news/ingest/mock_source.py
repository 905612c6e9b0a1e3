from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from ..models import ArticleBase, make_article_id, utcnow
from .source import IngestionSource

# (title, slug, summary, source, age in hours)
FIXTURES = [
    (
        "New Game Update Coming Soon",
        "new-game-update-coming-soon",
        "Developers announce major update with new features and improvements.",
        "GameNews Network",
        24,
    ),
    (
        "Esports Tournament Results Are Out",
        "esports-tournament-results",
        "The year's biggest esports tournament has ended, with the champion team winning a million-dollar prize.",
        "eSports Daily",
        48,
    ),
    (
        "Indie Game Sensation Gains Popularity",
        "indie-game-sensation",
        "An indie game developed by a small team goes viral, selling over 500,000 copies.",
        "Indie Game Watch",
        72,
    ),
    (
        "Virtual Reality Gaming Reaches New Heights",
        "vr-gaming-new-heights",
        "Latest VR technology promises unprecedented immersive gaming experiences.",
        "VR Gaming World",
        96,
    ),
]

MOCK_CONTENT = (
    "This is the full content of the news article. In a real deployment it would be fetched from the source website. "
    "Developers today officially announced that the highly anticipated game update will be released next month. "
    "This update will include brand new maps, characters, and gameplay mechanics.\n\n"
    "Additional details about the update include new quests, improved graphics, and enhanced multiplayer capabilities. "
    "The update will be free for all existing players and will be rolled out in phases to ensure server stability."
)


class MockSource(IngestionSource):
    """Deterministic fixture articles, timestamped relative to the time of each fetch."""

    name = "mock"

    def __init__(self, base_url: str = "https://example.com/news/", fixtures: Optional[list] = None) -> None:
        self.base_url = base_url
        self.fixtures = list(fixtures if fixtures is not None else FIXTURES)

    def fetch_candidates(self) -> List[ArticleBase]:
        now = utcnow()
        out: List[ArticleBase] = []
        for i, (title, slug, summary, source, age_hours) in enumerate(self.fixtures, start=1):
            url = f"{self.base_url}{slug}"
            out.append(
                ArticleBase(
                    id=make_article_id(url),
                    title=title,
                    url=url,
                    image_url=f"https://picsum.photos/600/400?random={i}",
                    summary=summary,
                    source=source,
                    published_at=now - timedelta(hours=age_hours),
                )
            )
        return out

    def fetch_content(self, url: str) -> str:
        return MOCK_CONTENT

"""
Abstract interface for ingestion sources.

A source produces candidate articles (metadata only) and, per URL, the full
body text. Sources never raise into the ingestion cycle: fetch failures
degrade to an empty candidate list or to placeholder content.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models import ArticleBase

PLACEHOLDER_CONTENT = "Full article content is currently unavailable. Please visit the original source."


class IngestionSource(ABC):
    """Abstract base class for article sources."""

    name = "source"

    @abstractmethod
    def fetch_candidates(self) -> List[ArticleBase]:
        """
        Fetch the current candidate articles, without content.

        Returns:
            Candidates in source order; empty on failure.
        """

    @abstractmethod
    def fetch_content(self, url: str) -> str:
        """
        Fetch the full body of one article.

        Returns:
            Body text, or PLACEHOLDER_CONTENT if it cannot be fetched in time.
        """

    def close(self) -> None:
        pass

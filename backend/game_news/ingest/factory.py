"""
Factory function for creating the ingestion source.
"""
from ..config import Settings
from .mock_source import MockSource
from .rss_source import RssSource
from .source import IngestionSource


def create_source(settings: Settings) -> IngestionSource:
    """
    Create the source named by settings.ingest_source:
    - 'mock': MockSource fixtures (default)
    - 'rss': RssSource over settings.rss_feeds, or the default feed list
    """
    if settings.ingest_source == "rss":
        return RssSource(
            feeds=settings.rss_feed_list() or None,
            timeout=settings.fetch_timeout_seconds,
            topic_filter=settings.enable_topic_filter,
        )
    return MockSource()

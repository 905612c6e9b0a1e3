from __future__ import annotations

from datetime import timedelta
import logging
from typing import Dict

from ..storage.base import Storage
from .source import PLACEHOLDER_CONTENT, IngestionSource

logger = logging.getLogger(__name__)


def run_ingestion_cycle(storage: Storage, source: IngestionSource, max_age: timedelta) -> Dict[str, int]:
    """Fetch candidates, upsert them with their content, then sweep expired articles.

    Source failures never raise here; storage errors propagate to the caller.
    """
    try:
        candidates = source.fetch_candidates()
    except Exception:
        # a source is supposed to degrade on its own; never let one break the cycle
        logger.exception("[ingest.cycle] %s source failed to fetch candidates", source.name)
        candidates = []

    def resolve(url: str) -> str:
        try:
            return source.fetch_content(url)
        except Exception:
            logger.exception("[ingest.cycle] content fetch failed for %s", url)
            return PLACEHOLDER_CONTENT

    upserted = storage.articles.bulk_upsert(candidates, resolve) if candidates else 0
    expired = storage.articles.expire(max_age)
    logger.info("[ingest.cycle] source=%s upserted=%d expired=%d", source.name, upserted, expired)
    return {"upserted": upserted, "expired": expired}

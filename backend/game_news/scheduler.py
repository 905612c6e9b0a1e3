from __future__ import annotations

from datetime import datetime, timedelta
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .config import Settings
from .errors import StoreError
from .ingest.cycle import run_ingestion_cycle
from .ingest.source import IngestionSource
from .storage.base import Storage

logger = logging.getLogger(__name__)

INGEST_JOB_ID = "ingest"
MISFIRE_GRACE_SECONDS = 30


def ingest_tick(storage: Storage, source: IngestionSource, max_age: timedelta) -> Optional[dict]:
    """One scheduled ingestion run. Errors are logged; the next tick is the retry."""
    try:
        return run_ingestion_cycle(storage, source, max_age)
    except StoreError:
        logger.exception("[scheduler] ingestion tick failed on storage")
    except Exception:
        logger.exception("[scheduler] ingestion tick failed")
    return None


def create_scheduler(settings: Settings, storage: Storage, source: IngestionSource) -> AsyncIOScheduler:
    # Sync jobs run in the event loop's default thread pool.
    # Late or overlapping ticks are skipped, not queued.
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        ingest_tick,
        "interval",
        minutes=settings.ingest_interval_minutes,
        id=INGEST_JOB_ID,
        args=[storage, source, timedelta(days=settings.max_age_days)],
        next_run_time=datetime.now(),
        coalesce=True,
        max_instances=1,
        misfire_grace_time=MISFIRE_GRACE_SECONDS,
    )
    return scheduler

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from ..config import Settings
from ..deps import get_app_settings, get_source, get_storage
from ..ingest.cycle import run_ingestion_cycle
from ..ingest.source import IngestionSource
from ..storage.base import Storage


router = APIRouter(prefix="/admin")


@router.post("/refresh")
def manual_refresh(
    x_admin_token: Optional[str] = Header(None),
    max_age_days: Optional[int] = Query(None, ge=1, le=90),
    settings: Settings = Depends(get_app_settings),
    storage: Storage = Depends(get_storage),
    source: IngestionSource = Depends(get_source),
):
    if not settings.admin_token or x_admin_token != settings.admin_token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    days = max_age_days if max_age_days is not None else settings.max_age_days
    return run_ingestion_cycle(storage, source, timedelta(days=days))

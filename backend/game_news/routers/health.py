from fastapi import APIRouter, Depends

from ..deps import get_storage
from ..storage.base import Storage


router = APIRouter()


@router.get("/health")
def health(storage: Storage = Depends(get_storage)):
    return {"status": "ok", "storage": storage.backend}

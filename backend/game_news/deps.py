from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings
from .ingest.source import IngestionSource
from .security import verify_token
from .storage.base import Storage

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_source(request: Request) -> IngestionSource:
    return request.app.state.source


def get_session_ttl(settings: Settings = Depends(get_app_settings)) -> timedelta:
    return timedelta(hours=settings.session_ttl_hours)


def current_account_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authorization required")
    identity = verify_token(credentials.credentials, request.app.state.session_secret)
    if identity is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session token")
    return identity[0]

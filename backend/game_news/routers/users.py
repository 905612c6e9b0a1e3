from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..deps import get_session_ttl, get_storage
from ..errors import Conflict, NotFound
from ..schemas import Credentials, LoginOut, UserOut
from ..security import hash_password, issue_token, verify_password
from ..storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users")


@router.post("/register", response_model=UserOut)
def register_user(body: Credentials, storage: Storage = Depends(get_storage)):
    try:
        account_id = storage.accounts.create(body.username, hash_password(body.password))
    except Conflict:
        raise HTTPException(status_code=400, detail="Username already exists")
    logger.info("[users] registered id=%s username=%s", account_id, body.username)
    return UserOut(id=account_id, username=body.username)


@router.post("/login", response_model=LoginOut)
def login_user(
    body: Credentials,
    request: Request,
    storage: Storage = Depends(get_storage),
    ttl: timedelta = Depends(get_session_ttl),
):
    try:
        account = storage.accounts.find_by_username(body.username)
    except NotFound:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if not verify_password(body.password, account.password_hash):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    token = issue_token(account.id, account.username, request.app.state.session_secret, ttl)
    return LoginOut(id=account.id, username=account.username, token=token)

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..deps import current_account_id, get_storage
from ..schemas import BookmarkRequest, MessageOut, NewsOut
from ..storage.base import Storage


router = APIRouter(prefix="/protected")


@router.post("/bookmarks", response_model=MessageOut)
def add_bookmark(
    body: BookmarkRequest,
    account_id: int = Depends(current_account_id),
    storage: Storage = Depends(get_storage),
):
    if storage.articles.find_by_id(body.article_id) is None:
        raise HTTPException(status_code=404, detail="News not found")
    storage.bookmarks.add(account_id, body.article_id)
    return MessageOut(message="Bookmark added")


@router.delete("/bookmarks", response_model=MessageOut)
def remove_bookmark(
    body: BookmarkRequest,
    account_id: int = Depends(current_account_id),
    storage: Storage = Depends(get_storage),
):
    storage.bookmarks.remove(account_id, body.article_id)
    return MessageOut(message="Bookmark removed")


@router.get("/bookmarks", response_model=List[NewsOut])
def list_bookmarks(
    account_id: int = Depends(current_account_id),
    storage: Storage = Depends(get_storage),
):
    return [NewsOut.from_article(a) for a in storage.bookmarks.list_articles_for(account_id)]

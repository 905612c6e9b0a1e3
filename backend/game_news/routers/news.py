from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import Settings
from ..deps import get_app_settings, get_storage
from ..schemas import NewsOut
from ..storage.base import Storage


router = APIRouter()


@router.get("/news", response_model=List[NewsOut])
def list_news(
    source: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=200),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    if source:
        articles = storage.articles.find_by_source(source)
    else:
        articles = storage.articles.find_recent(limit or settings.page_size)
    return [NewsOut.from_article(a) for a in articles]


@router.get("/news/{article_id}", response_model=NewsOut)
def get_news(article_id: str, storage: Storage = Depends(get_storage)):
    article = storage.articles.find_by_id(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="News not found")
    return NewsOut.from_article(article, with_content=True)


@router.get("/search", response_model=List[NewsOut])
def search_news(q: Optional[str] = Query(None), storage: Storage = Depends(get_storage)):
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")
    return [NewsOut.from_article(a) for a in storage.articles.search(q.strip())]


@router.get("/sources", response_model=List[str])
def list_sources(storage: Storage = Depends(get_storage)):
    return storage.articles.list_sources()

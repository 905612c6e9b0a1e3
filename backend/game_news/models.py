from datetime import datetime, timezone
import hashlib
from typing import Optional

from sqlalchemy import Column, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current time as naive UTC, the form every timestamp is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def make_article_id(url: str) -> str:
    """Stable 8-hex-char identifier derived from the article URL."""
    return hashlib.md5(url.encode("utf-8", errors="ignore")).hexdigest()[:8]


class ArticleBase(SQLModel):
    id: str = Field(primary_key=True, max_length=8)

    title: str
    url: str
    image_url: Optional[str] = None
    summary: str = ""
    source: str = Field(index=True)

    published_at: datetime = Field(index=True)


class Article(ArticleBase, table=True):
    content: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))


class Account(SQLModel, table=True):
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)


class Bookmark(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("account_id", "article_id", name="uq_bookmark_account_article"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: int = Field(index=True)
    article_id: str = Field(index=True, max_length=8)
    created_at: datetime = Field(default_factory=utcnow)

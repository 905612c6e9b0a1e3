from typing import Optional

from pydantic import BaseModel, Field

from .models import Article


class NewsOut(BaseModel):
    id: str
    title: str
    summary: str
    content: str
    image: Optional[str]
    source: str
    date: str
    url: str

    @classmethod
    def from_article(cls, article: Article, with_content: bool = False) -> "NewsOut":
        return cls(
            id=article.id,
            title=article.title,
            summary=article.summary or "",
            content=(article.content or "") if with_content else "",
            image=article.image_url,
            source=article.source,
            date=article.published_at.strftime("%Y-%m-%d"),
            url=article.url,
        )


class Credentials(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=256)


class UserOut(BaseModel):
    id: int
    username: str


class LoginOut(UserOut):
    token: str


class BookmarkRequest(BaseModel):
    article_id: str = Field(min_length=1, max_length=8)


class MessageOut(BaseModel):
    message: str

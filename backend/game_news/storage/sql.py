"""
SQL storage backend (SQLite file or PostgreSQL server) on SQLModel.

All statements run inside the storage-wide ReadWriteLock; SQLite gets no
concurrent writers that way, and PostgreSQL sees the same serialization the
other backends give.
"""
from contextlib import contextmanager
from datetime import timedelta
import logging
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from ..errors import Conflict, NotFound, StoreUnavailable
from ..models import Account, Article, ArticleBase, Bookmark, to_naive_utc, utcnow
from .base import AccountRepository, ArticleRepository, BookmarkRepository, ContentResolver, Storage
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str):
    connect_args = {}
    kwargs = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(database_url, connect_args=connect_args, **kwargs)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _row(article: ArticleBase, content: str) -> Article:
    data = article.model_dump(exclude={"content"})
    data["published_at"] = to_naive_utc(article.published_at)
    return Article(**data, content=content or "")


class _SqlRepository:
    def __init__(self, engine, lock: ReadWriteLock) -> None:
        self._engine = engine
        self._lock = lock

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with Session(self._engine, expire_on_commit=False) as session:
            try:
                yield session
            except (OperationalError, DBAPIError) as exc:
                session.rollback()
                if isinstance(exc, IntegrityError):
                    raise
                logger.error("[storage.sql] datastore error: %s", exc)
                raise StoreUnavailable(str(exc)) from exc

    @contextmanager
    def _reading(self) -> Iterator[Session]:
        with self._lock.read_locked(), self._session() as session:
            yield session

    @contextmanager
    def _writing(self) -> Iterator[Session]:
        with self._lock.write_locked(), self._session() as session:
            yield session


class SqlArticleRepository(_SqlRepository, ArticleRepository):
    def upsert(self, article: ArticleBase, content: str) -> Article:
        with self._writing() as session:
            merged = session.merge(_row(article, content))
            session.commit()
            return merged

    def bulk_upsert(self, articles: Iterable[ArticleBase], content_resolver: ContentResolver) -> int:
        rows = [_row(a, content_resolver(a.url)) for a in articles]
        with self._writing() as session:
            for row in rows:
                session.merge(row)
            session.commit()
        return len(rows)

    def _newest_first(self):
        return select(Article).order_by(Article.published_at.desc(), Article.id)

    def find_all(self) -> List[Article]:
        return self.find_recent(0)

    def find_recent(self, limit: int) -> List[Article]:
        stmt = self._newest_first()
        if limit > 0:
            stmt = stmt.limit(limit)
        with self._reading() as session:
            return list(session.exec(stmt).all())

    def find_by_id(self, article_id: str) -> Optional[Article]:
        with self._reading() as session:
            return session.get(Article, article_id)

    def search(self, term: str) -> List[Article]:
        like = _like_pattern(term)
        stmt = self._newest_first().where(
            or_(
                Article.title.ilike(like, escape="\\"),
                Article.summary.ilike(like, escape="\\"),
                Article.content.ilike(like, escape="\\"),
            )
        )
        with self._reading() as session:
            return list(session.exec(stmt).all())

    def find_by_source(self, source: str) -> List[Article]:
        stmt = self._newest_first().where(Article.source == source)
        with self._reading() as session:
            return list(session.exec(stmt).all())

    def list_sources(self) -> List[str]:
        with self._reading() as session:
            rows = session.exec(select(Article.source).distinct().order_by(Article.source)).all()
        return [r[0] if isinstance(r, (tuple, list)) else r for r in rows]

    def expire(self, max_age: timedelta) -> int:
        cutoff = utcnow() - max_age
        with self._writing() as session:
            stale = session.exec(select(Article).where(Article.published_at < cutoff)).all()
            stale_ids = [a.id for a in stale]
            if stale_ids:
                for bookmark in session.exec(select(Bookmark).where(Bookmark.article_id.in_(stale_ids))).all():
                    session.delete(bookmark)
                for article in stale:
                    session.delete(article)
                session.commit()
        if stale_ids:
            logger.info("[storage.sql] expired %d articles older than %s", len(stale_ids), cutoff)
        return len(stale_ids)


class SqlAccountRepository(_SqlRepository, AccountRepository):
    def create(self, username: str, password_hash: str) -> int:
        with self._writing() as session:
            existing = session.exec(select(Account).where(Account.username == username)).first()
            if existing is not None:
                raise Conflict(f"username {username!r} already exists")
            account = Account(username=username, password_hash=password_hash, created_at=utcnow())
            session.add(account)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise Conflict(f"username {username!r} already exists") from exc
            session.refresh(account)
            return account.id

    def find_by_username(self, username: str) -> Account:
        with self._reading() as session:
            account = session.exec(select(Account).where(Account.username == username)).first()
        if account is None:
            raise NotFound(f"no account named {username!r}")
        return account


class SqlBookmarkRepository(_SqlRepository, BookmarkRepository):
    def add(self, account_id: int, article_id: str) -> None:
        with self._writing() as session:
            existing = session.exec(
                select(Bookmark).where(Bookmark.account_id == account_id, Bookmark.article_id == article_id)
            ).first()
            if existing is not None:
                return
            session.add(Bookmark(account_id=account_id, article_id=article_id, created_at=utcnow()))
            session.commit()

    def remove(self, account_id: int, article_id: str) -> None:
        with self._writing() as session:
            existing = session.exec(
                select(Bookmark).where(Bookmark.account_id == account_id, Bookmark.article_id == article_id)
            ).first()
            if existing is None:
                return
            session.delete(existing)
            session.commit()

    def list_articles_for(self, account_id: int) -> List[Article]:
        # inner join drops bookmarks whose article is gone
        stmt = (
            select(Article)
            .join(Bookmark, Bookmark.article_id == Article.id)
            .where(Bookmark.account_id == account_id)
            .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        )
        with self._reading() as session:
            return list(session.exec(stmt).all())


class SqlStorage(Storage):
    backend = "sql"

    def __init__(self, database_url: str) -> None:
        self.engine = create_db_engine(database_url)
        try:
            SQLModel.metadata.create_all(self.engine)
        except OperationalError as exc:
            raise StoreUnavailable(f"cannot initialise schema: {exc}") from exc
        lock = ReadWriteLock()
        super().__init__(
            SqlArticleRepository(self.engine, lock),
            SqlAccountRepository(self.engine, lock),
            SqlBookmarkRepository(self.engine, lock),
            lock,
        )
        logger.info("[storage.sql] connected to %s", self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self.engine.dispose()

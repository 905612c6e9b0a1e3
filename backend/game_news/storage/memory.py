"""
In-memory storage backend.

Keeps all three relations in plain dicts guarded by the storage-wide
ReadWriteLock. Used for tests and for running without a database.
"""
from datetime import timedelta
import itertools
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import Conflict, NotFound
from ..models import Account, Article, ArticleBase, Bookmark, to_naive_utc, utcnow
from .base import AccountRepository, ArticleRepository, BookmarkRepository, ContentResolver, Storage
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)


def _copy(article: Article) -> Article:
    return Article(**article.model_dump())


def _newest_first(articles: Iterable[Article]) -> List[Article]:
    # sorted() is stable, so equal timestamps keep insertion order
    return sorted(articles, key=lambda a: a.published_at, reverse=True)


def _build(article: ArticleBase, content: str) -> Article:
    data = article.model_dump(exclude={"content"})
    data["published_at"] = to_naive_utc(article.published_at)
    return Article(**data, content=content or "")


class InMemoryArticleRepository(ArticleRepository):
    def __init__(self, lock: ReadWriteLock, on_delete: Optional[Callable[[List[str]], None]] = None) -> None:
        self._lock = lock
        self._articles: Dict[str, Article] = {}
        self._on_delete = on_delete

    def upsert(self, article: ArticleBase, content: str) -> Article:
        row = _build(article, content)
        with self._lock.write_locked():
            self._articles[row.id] = row
        return _copy(row)

    def bulk_upsert(self, articles: Iterable[ArticleBase], content_resolver: ContentResolver) -> int:
        rows = [_build(a, content_resolver(a.url)) for a in articles]
        with self._lock.write_locked():
            for row in rows:
                self._articles[row.id] = row
        return len(rows)

    def find_all(self) -> List[Article]:
        return self.find_recent(0)

    def find_recent(self, limit: int) -> List[Article]:
        with self._lock.read_locked():
            rows = _newest_first(self._articles.values())
        if limit > 0:
            rows = rows[:limit]
        return [_copy(a) for a in rows]

    def find_by_id(self, article_id: str) -> Optional[Article]:
        with self._lock.read_locked():
            row = self._articles.get(article_id)
        return _copy(row) if row is not None else None

    def search(self, term: str) -> List[Article]:
        needle = term.lower()
        with self._lock.read_locked():
            hits = [
                a
                for a in self._articles.values()
                if needle in a.title.lower() or needle in (a.summary or "").lower() or needle in (a.content or "").lower()
            ]
        return [_copy(a) for a in _newest_first(hits)]

    def find_by_source(self, source: str) -> List[Article]:
        with self._lock.read_locked():
            hits = [a for a in self._articles.values() if a.source == source]
        return [_copy(a) for a in _newest_first(hits)]

    def list_sources(self) -> List[str]:
        with self._lock.read_locked():
            return sorted({a.source for a in self._articles.values()})

    def expire(self, max_age: timedelta) -> int:
        cutoff = utcnow() - max_age
        with self._lock.write_locked():
            stale = [key for key, a in self._articles.items() if a.published_at < cutoff]
            for key in stale:
                del self._articles[key]
            if stale and self._on_delete is not None:
                self._on_delete(stale)
        if stale:
            logger.info("[storage.memory] expired %d articles older than %s", len(stale), cutoff)
        return len(stale)

    def _get_unlocked(self, article_id: str) -> Optional[Article]:
        return self._articles.get(article_id)


class InMemoryAccountRepository(AccountRepository):
    def __init__(self, lock: ReadWriteLock) -> None:
        self._lock = lock
        self._by_username: Dict[str, Account] = {}
        self._ids = itertools.count(1)

    def create(self, username: str, password_hash: str) -> int:
        with self._lock.write_locked():
            if username in self._by_username:
                raise Conflict(f"username {username!r} already exists")
            account = Account(id=next(self._ids), username=username, password_hash=password_hash, created_at=utcnow())
            self._by_username[username] = account
        return account.id

    def find_by_username(self, username: str) -> Account:
        with self._lock.read_locked():
            account = self._by_username.get(username)
        if account is None:
            raise NotFound(f"no account named {username!r}")
        return Account(**account.model_dump())


class InMemoryBookmarkRepository(BookmarkRepository):
    def __init__(self, lock: ReadWriteLock, articles: InMemoryArticleRepository) -> None:
        self._lock = lock
        self._articles = articles
        # (account_id, article_id) -> (bookmark, insertion sequence)
        self._bookmarks: Dict[Tuple[int, str], Tuple[Bookmark, int]] = {}
        self._seq = itertools.count()

    def add(self, account_id: int, article_id: str) -> None:
        key = (account_id, article_id)
        with self._lock.write_locked():
            if key in self._bookmarks:
                return
            bookmark = Bookmark(account_id=account_id, article_id=article_id, created_at=utcnow())
            self._bookmarks[key] = (bookmark, next(self._seq))

    def remove(self, account_id: int, article_id: str) -> None:
        with self._lock.write_locked():
            self._bookmarks.pop((account_id, article_id), None)

    def list_articles_for(self, account_id: int) -> List[Article]:
        with self._lock.read_locked():
            entries = [entry for (owner, _), entry in self._bookmarks.items() if owner == account_id]
            entries.sort(key=lambda e: (e[0].created_at, e[1]), reverse=True)
            rows = [self._articles._get_unlocked(b.article_id) for b, _ in entries]
        return [_copy(a) for a in rows if a is not None]

    def drop_articles(self, article_ids: List[str]) -> None:
        # Called with the write lock already held by the expiry sweep
        doomed = set(article_ids)
        for key in [k for k in self._bookmarks if k[1] in doomed]:
            del self._bookmarks[key]


class InMemoryStorage(Storage):
    backend = "memory"

    def __init__(self) -> None:
        lock = ReadWriteLock()
        articles = InMemoryArticleRepository(lock)
        bookmarks = InMemoryBookmarkRepository(lock, articles)
        articles._on_delete = bookmarks.drop_articles
        super().__init__(articles, InMemoryAccountRepository(lock), bookmarks, lock)

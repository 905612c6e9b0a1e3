"""
Abstract repository interfaces.

Every backend (in-memory, SQL) implements the same three repositories and
bundles them in a Storage whose repositories share one reader/writer lock.
"""
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Callable, Iterable, List, Optional

from ..models import Account, Article, ArticleBase
from .locks import ReadWriteLock

ContentResolver = Callable[[str], str]


class ArticleRepository(ABC):
    """Persistence contract for articles."""

    @abstractmethod
    def upsert(self, article: ArticleBase, content: str) -> Article:
        """
        Insert the article or fully replace the record with the same id.

        Raises:
            StoreUnavailable: the backend could not be reached.
        """

    @abstractmethod
    def bulk_upsert(self, articles: Iterable[ArticleBase], content_resolver: ContentResolver) -> int:
        """
        Upsert a batch atomically.

        Content is resolved for every article (by URL) before the write
        starts; if any write fails nothing from the batch is kept.

        Returns:
            Number of articles written.
        """

    @abstractmethod
    def find_all(self) -> List[Article]:
        """All articles, newest first."""

    @abstractmethod
    def find_recent(self, limit: int) -> List[Article]:
        """Up to `limit` newest articles; limit <= 0 means no limit."""

    @abstractmethod
    def find_by_id(self, article_id: str) -> Optional[Article]:
        """The article, or None if there is no such id."""

    @abstractmethod
    def search(self, term: str) -> List[Article]:
        """Case-insensitive substring match on title, summary or content, newest first."""

    @abstractmethod
    def find_by_source(self, source: str) -> List[Article]:
        """Exact, case-sensitive match on the source label, newest first."""

    @abstractmethod
    def list_sources(self) -> List[str]:
        """Sorted distinct source labels."""

    @abstractmethod
    def expire(self, max_age: timedelta) -> int:
        """
        Delete every article published before now - max_age, along with
        bookmarks pointing at them.

        Returns:
            Number of articles deleted.
        """


class AccountRepository(ABC):
    """Persistence contract for accounts. Never sees plaintext passwords."""

    @abstractmethod
    def create(self, username: str, password_hash: str) -> int:
        """
        Create an account and return its id.

        Raises:
            Conflict: the username is taken.
        """

    @abstractmethod
    def find_by_username(self, username: str) -> Account:
        """
        Raises:
            NotFound: no account has this username.
        """


class BookmarkRepository(ABC):
    """Persistence contract for account/article bookmarks."""

    @abstractmethod
    def add(self, account_id: int, article_id: str) -> None:
        """Bookmark an article; adding an existing pair is a no-op."""

    @abstractmethod
    def remove(self, account_id: int, article_id: str) -> None:
        """Drop a bookmark; removing a missing pair is a no-op."""

    @abstractmethod
    def list_articles_for(self, account_id: int) -> List[Article]:
        """Bookmarked articles that still exist, most recently bookmarked first."""


class Storage:
    """The three repositories of one backend plus their shared lock."""

    backend = "abstract"

    def __init__(
        self,
        articles: ArticleRepository,
        accounts: AccountRepository,
        bookmarks: BookmarkRepository,
        lock: ReadWriteLock,
    ) -> None:
        self.articles = articles
        self.accounts = accounts
        self.bookmarks = bookmarks
        self.lock = lock

    def close(self) -> None:
        pass

import pytest

from game_news.config import Settings
from game_news.errors import StoreUnavailable
from game_news.storage.factory import create_storage
from game_news.storage.memory import InMemoryStorage
from game_news.storage.sql import SqlStorage


def test_memory_backend():
    storage = create_storage(Settings(storage_backend="memory"))
    assert isinstance(storage, InMemoryStorage)
    assert storage.backend == "memory"


def test_sql_backend_uses_database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'news.db'}"
    storage = create_storage(Settings(storage_backend="sql", database_url=url))
    try:
        assert isinstance(storage, SqlStorage)
        assert (tmp_path / "news.db").exists()
    finally:
        storage.close()


def test_sql_in_memory_database_is_shared_across_sessions(article_factory):
    storage = SqlStorage("sqlite://")
    try:
        article = article_factory("Shared connection")
        storage.articles.upsert(article, "")
        assert storage.articles.find_by_id(article.id).title == "Shared connection"
    finally:
        storage.close()


def test_unreachable_database_is_store_unavailable(tmp_path):
    with pytest.raises(StoreUnavailable):
        SqlStorage(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'news.db'}")


def test_data_persists_across_instances(tmp_path, article_factory):
    url = f"sqlite:///{tmp_path / 'news.db'}"
    article = article_factory("Persisted")
    first = SqlStorage(url)
    first.articles.upsert(article, "body")
    first.accounts.create("alice", "h")
    first.close()

    second = SqlStorage(url)
    try:
        assert second.articles.find_by_id(article.id).content == "body"
        assert second.accounts.create("bob", "h") == 2
    finally:
        second.close()

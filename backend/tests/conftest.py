from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from game_news.config import Settings
from game_news.ingest.mock_source import MockSource
from game_news.main import create_app
from game_news.models import ArticleBase, make_article_id, utcnow
from game_news.storage.memory import InMemoryStorage
from game_news.storage.sql import SqlStorage


def make_article(title, hours_ago=0, source="GameSpot", summary="", url=None):
    url = url or "https://example.com/news/" + title.lower().replace(" ", "-")
    return ArticleBase(
        id=make_article_id(url),
        title=title,
        url=url,
        image_url=None,
        summary=summary,
        source=source,
        published_at=utcnow() - timedelta(hours=hours_ago),
    )


@pytest.fixture(params=["memory", "sql"])
def storage(request, tmp_path):
    """Every repository contract test runs against both backends."""
    if request.param == "memory":
        store = InMemoryStorage()
    else:
        store = SqlStorage(f"sqlite:///{tmp_path / 'news.db'}")
    yield store
    store.close()


@pytest.fixture
def settings():
    return Settings(
        storage_backend="memory",
        run_scheduler=False,
        session_secret="test-secret",
        admin_token="admin-token",
        page_size=20,
        max_age_days=7,
    )


@pytest.fixture
def memory_storage():
    return InMemoryStorage()


@pytest.fixture
def client(settings, memory_storage):
    app = create_app(settings=settings, storage=memory_storage, source=MockSource())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    client.post("/api/users/register", json={"username": "alice", "password": "s3cret"})
    resp = client.post("/api/users/login", json={"username": "alice", "password": "s3cret"})
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def article_factory():
    return make_article

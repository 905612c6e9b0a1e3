from game_news.errors import StoreUnavailable


def seed(storage, article_factory, count, source="GameSpot", start_hours=1):
    articles = []
    for i in range(count):
        article = article_factory(f"{source} story {i}", hours_ago=start_hours + i, source=source, summary=f"summary {i}")
        storage.articles.upsert(article, f"full body {i}")
        articles.append(article)
    return articles


def test_list_news_caps_at_page_size_newest_first(client, memory_storage, article_factory):
    seed(memory_storage, article_factory, 25)

    resp = client.get("/api/news")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 20
    assert data[0]["title"] == "GameSpot story 0"
    assert all(item["content"] == "" for item in data)
    assert set(data[0]) == {"id", "title", "summary", "content", "image", "source", "date", "url"}


def test_list_news_by_source_is_not_capped(client, memory_storage, article_factory):
    seed(memory_storage, article_factory, 22, source="IGN")
    seed(memory_storage, article_factory, 3, source="GameSpot")

    data = client.get("/api/news", params={"source": "IGN"}).json()
    assert len(data) == 22
    assert {item["source"] for item in data} == {"IGN"}


def test_list_news_accepts_explicit_limit(client, memory_storage, article_factory):
    seed(memory_storage, article_factory, 10)
    assert len(client.get("/api/news", params={"limit": 3}).json()) == 3


def test_get_news_includes_content(client, memory_storage, article_factory):
    article = seed(memory_storage, article_factory, 1)[0]

    resp = client.get(f"/api/news/{article.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["content"] == "full body 0"
    assert body["date"] == article.published_at.strftime("%Y-%m-%d")


def test_get_news_unknown_id_is_404(client):
    assert client.get("/api/news/deadbeef").status_code == 404


def test_search_requires_q(client):
    assert client.get("/api/search").status_code == 400
    assert client.get("/api/search", params={"q": "  "}).status_code == 400


def test_search_is_case_insensitive(client, memory_storage, article_factory):
    memory_storage.articles.upsert(article_factory("Esports finals", hours_ago=1), "")
    memory_storage.articles.upsert(article_factory("Racing sim review", hours_ago=2), "")

    upper = client.get("/api/search", params={"q": "ESPORTS"}).json()
    lower = client.get("/api/search", params={"q": "esports"}).json()
    assert upper == lower
    assert [item["title"] for item in upper] == ["Esports finals"]
    assert upper[0]["content"] == ""


def test_sources_are_derived_from_articles(client, memory_storage, article_factory):
    seed(memory_storage, article_factory, 1, source="IGN")
    seed(memory_storage, article_factory, 1, source="eSports Daily")
    assert client.get("/api/sources").json() == ["IGN", "eSports Daily"]


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "storage": "memory"}


def test_store_unavailable_is_503(client, memory_storage, monkeypatch):
    def unavailable(limit):
        raise StoreUnavailable("connection refused")

    monkeypatch.setattr(memory_storage.articles, "find_recent", unavailable)
    resp = client.get("/api/news")
    assert resp.status_code == 503
    assert resp.json() == {"detail": "Storage unavailable"}

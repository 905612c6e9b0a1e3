import pytest

from game_news.client import ApiError, NewsClient


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": headers, **kwargs})
        return self.responses.pop(0)


def test_list_news_passes_filters():
    session = FakeSession([FakeResponse(200, [{"id": "abc"}])])
    client = NewsClient("http://api.test/", session=session)

    assert client.list_news(source="IGN", limit=5) == [{"id": "abc"}]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://api.test/api/news"
    assert call["params"] == {"source": "IGN", "limit": 5}
    assert "Authorization" not in call["headers"]


def test_login_stores_token_for_protected_calls():
    session = FakeSession(
        [
            FakeResponse(200, {"id": 1, "username": "alice", "token": "tok"}),
            FakeResponse(200, {"message": "Bookmark added"}),
        ]
    )
    client = NewsClient("http://api.test", session=session)

    client.login("alice", "pw")
    client.add_bookmark("abcd1234")

    assert session.calls[0]["json"] == {"username": "alice", "password": "pw"}
    assert session.calls[1]["headers"]["Authorization"] == "Bearer tok"
    assert session.calls[1]["json"] == {"article_id": "abcd1234"}


def test_error_responses_raise_api_error():
    session = FakeSession([FakeResponse(400, {"detail": "Username already exists"})])
    client = NewsClient("http://api.test", session=session)

    with pytest.raises(ApiError) as excinfo:
        client.register("alice", "pw")
    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Username already exists"


def test_non_json_error_body_is_kept_as_text():
    session = FakeSession([FakeResponse(502, ValueError("not json"))])
    client = NewsClient("http://api.test", session=session)

    with pytest.raises(ApiError) as excinfo:
        client.sources()
    assert excinfo.value.status_code == 502

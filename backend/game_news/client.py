"""Small HTTP client for the news API, used by the Streamlit reader."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class NewsClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        r = self.session.request(method, f"{self.base_url}/api{path}", headers=headers, timeout=self.timeout, **kwargs)
        if r.status_code >= 400:
            try:
                detail = r.json().get("detail")
            except ValueError:
                detail = r.text
            raise ApiError(r.status_code, detail)
        return r.json()

    def list_news(self, source: Optional[str] = None, limit: Optional[int] = None) -> List[Dict]:
        params: Dict[str, Any] = {}
        if source:
            params["source"] = source
        if limit:
            params["limit"] = limit
        return self._request("GET", "/news", params=params)

    def get_news(self, article_id: str) -> Dict:
        return self._request("GET", f"/news/{article_id}")

    def search(self, q: str) -> List[Dict]:
        return self._request("GET", "/search", params={"q": q})

    def sources(self) -> List[str]:
        return self._request("GET", "/sources")

    def register(self, username: str, password: str) -> Dict:
        return self._request("POST", "/users/register", json={"username": username, "password": password})

    def login(self, username: str, password: str) -> Dict:
        data = self._request("POST", "/users/login", json={"username": username, "password": password})
        self.token = data.get("token")
        return data

    def bookmarks(self) -> List[Dict]:
        return self._request("GET", "/protected/bookmarks")

    def add_bookmark(self, article_id: str) -> Dict:
        return self._request("POST", "/protected/bookmarks", json={"article_id": article_id})

    def remove_bookmark(self, article_id: str) -> Dict:
        return self._request("DELETE", "/protected/bookmarks", json={"article_id": article_id})

import os
import html
import streamlit as st

from game_news.client import ApiError, NewsClient


st.set_page_config(page_title="Game News", layout="wide")
st.title("Game News")

DEFAULT_BASE = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")

st.markdown(
    """
<style>
.card { border: 1px solid #e5e7eb; border-radius: 8px; padding: 12px; margin-bottom: 10px; background: #ffffff; }
.title { font-weight: 600; font-size: 16px; margin-bottom: 6px; }
.date { color: #6b7280; font-size: 12px; margin-bottom: 8px; }
.summary { font-size: 14px; color: #111827; white-space: pre-wrap; word-break: break-word; line-height: 1.5; }

@media (prefers-color-scheme: dark) {
  .card { border-color: #1f2937; background: #121934; }
  .title { color: #e5e7eb; }
  .date { color: #9ca3af; }
  .summary { color: #e5e7eb; }
}
</style>
""",
    unsafe_allow_html=True,
)


def get_client(base_url: str) -> NewsClient:
    client = st.session_state.get("client")
    if client is None or client.base_url != base_url.rstrip("/"):
        client = NewsClient(base_url)
        st.session_state["client"] = client
    return client


def safe(call, default):
    try:
        return call()
    except ApiError as e:
        st.error(f"Request failed: {e.detail}")
    except Exception as e:
        st.error(f"Request failed: {e}")
    return default


def render_cards(data, client: NewsClient, key_prefix: str, bookmarked: bool = False):
    for a in data:
        title = html.escape(a.get("title", "") or "")
        url = a.get("url", "") or ""
        date = html.escape(a.get("date", "") or "")
        summary = html.escape((a.get("summary") or "").strip())
        source = html.escape(a.get("source", "") or "")
        st.markdown(
            f"<div class='card'><div class='title'><a href='{url}' target='_blank'>{title}</a></div>"
            f"<div class='date'>{date}{(' · ' + source) if source else ''}</div>"
            f"<div class='summary'>{summary}</div></div>",
            unsafe_allow_html=True,
        )
        cols = st.columns(2)
        with cols[0]:
            if st.button("Read", key=f"{key_prefix}-read-{a['id']}"):
                st.session_state["article_id"] = a["id"]
        with cols[1]:
            if client.token:
                if bookmarked:
                    if st.button("Remove bookmark", key=f"{key_prefix}-rm-{a['id']}"):
                        safe(lambda: client.remove_bookmark(a["id"]), None)
                        st.rerun()
                elif st.button("Bookmark", key=f"{key_prefix}-bm-{a['id']}"):
                    safe(lambda: client.add_bookmark(a["id"]), None)


with st.sidebar:
    st.subheader("Settings")
    base_url = st.text_input("API Base URL", DEFAULT_BASE)
    client = get_client(base_url)
    st.divider()
    st.subheader("Account")
    username = st.text_input("Username")
    password = st.text_input("Password", type="password")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("Log in") and username and password:
            user = safe(lambda: client.login(username, password), None)
            if user:
                st.success(f"Logged in as {user['username']}")
    with c2:
        if st.button("Register") and username and password:
            user = safe(lambda: client.register(username, password), None)
            if user:
                st.success("Registered, now log in")
    if client.token:
        st.caption("Signed in")

article_id = st.session_state.get("article_id")
if article_id:
    article = safe(lambda: client.get_news(article_id), None)
    if article:
        st.subheader(article["title"])
        st.caption(f"{article['date']} · {article['source']}")
        if article.get("image"):
            st.image(article["image"])
        st.write(article["content"])
        st.markdown(f"[Original article]({article['url']})")
    if st.button("Back"):
        st.session_state["article_id"] = None
        st.rerun()
    st.stop()

tab_news, tab_search, tab_bookmarks = st.tabs(["Latest", "Search", "Bookmarks"])

with tab_news:
    sources = [""] + safe(client.sources, [])
    source = st.selectbox("Source", options=sources, index=0, format_func=lambda x: "All" if x == "" else x)
    render_cards(safe(lambda: client.list_news(source or None), []), client, "news")

with tab_search:
    q = st.text_input("Search", "")
    if q.strip():
        render_cards(safe(lambda: client.search(q), []), client, "search")

with tab_bookmarks:
    if not client.token:
        st.info("Log in to see your bookmarks.")
    else:
        render_cards(safe(client.bookmarks, []), client, "bookmarks", bookmarked=True)

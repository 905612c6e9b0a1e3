from functools import lru_cache
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    app_name: str = "Game News"
    environment: str = "development"

    # "memory" keeps everything in process; "sql" uses database_url (SQLite or PostgreSQL)
    storage_backend: Literal["memory", "sql"] = "sql"
    database_url: str = "sqlite:///./game_news.db"

    page_size: int = 20

    # Ingestion cycle
    ingest_interval_minutes: int = 60
    max_age_days: int = 7
    fetch_timeout_seconds: float = 10.0
    ingest_source: Literal["mock", "rss"] = "mock"
    # Comma-separated feed URLs; if empty, fall back to defaults in rss_sources
    rss_feeds: Optional[str] = None
    enable_topic_filter: bool = False
    run_scheduler: bool = True

    # Signing key for session tokens; generated per process when empty
    session_secret: str = ""
    session_ttl_hours: int = 24 * 7

    # Admin token for privileged endpoints like manual refresh
    admin_token: str = ""

    cors_origins: str = "http://localhost:5173,http://localhost:8080,http://localhost:8501"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    def cors_origin_list(self) -> List[str]:
        return [s.strip() for s in self.cors_origins.split(",") if s.strip()]

    def rss_feed_list(self) -> List[str]:
        return [s.strip() for s in (self.rss_feeds or "").split(",") if s.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

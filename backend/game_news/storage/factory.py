"""
Factory function for creating the storage backend.

The backend is chosen once, from the Settings passed in; nothing here reads
the environment.
"""
import logging

from ..config import Settings
from .base import Storage
from .memory import InMemoryStorage
from .sql import SqlStorage

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> Storage:
    """
    Create a storage bundle for settings.storage_backend:
    - 'memory': InMemoryStorage, nothing persisted
    - 'sql': SqlStorage on settings.database_url (SQLite or PostgreSQL)

    Raises:
        StoreUnavailable: the SQL database cannot be reached at startup.
    """
    if settings.storage_backend == "memory":
        logger.info("[storage] using in-memory storage")
        return InMemoryStorage()
    return SqlStorage(settings.database_url)

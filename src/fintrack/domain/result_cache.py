"""Time-limited cache for external classifier results."""

import hashlib
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Optional

from fintrack.config import DEFAULT_CACHE_TTL_DAYS
from fintrack.database.base import Database

CACHE_KEY_PREFIX = "ai_category_"
DEFAULT_TTL = timedelta(days=DEFAULT_CACHE_TTL_DAYS)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def cache_key(description: str, establishment: Optional[str]) -> str:
    """Build the cache key for a description/establishment pair."""
    digest = hashlib.md5((description + (establishment or "")).encode("utf-8")).hexdigest()
    return CACHE_KEY_PREFIX + digest


class ResultCache(ABC):
    """Key/value store whose entries expire after a TTL."""

    @abstractmethod
    def get(self, key: str) -> Optional[dict[str, Any]]:
        """Return the cached value, or None when missing or expired."""
        pass

    @abstractmethod
    def put(self, key: str, value: dict[str, Any], ttl: timedelta = DEFAULT_TTL) -> None:
        """Store a value for ``ttl``."""
        pass


class InMemoryResultCache(ResultCache):
    """Process-local cache, mostly useful in tests."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self.clock = clock
        self._entries: dict[str, tuple[dict[str, Any], datetime]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self.clock():
                del self._entries[key]
                return None
            return dict(value)

    def put(self, key: str, value: dict[str, Any], ttl: timedelta = DEFAULT_TTL) -> None:
        with self._lock:
            self._entries[key] = (dict(value), self.clock() + ttl)


class DatabaseResultCache(ResultCache):
    """Cache stored in the ``categorization_cache`` table.

    Access is serialized with a lock because the database session is shared
    with the worker threads of bulk re-categorization.
    """

    def __init__(self, db: Database, clock: Callable[[], datetime] = _utcnow):
        self.db = db
        self.clock = clock
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[dict[str, Any]]:
        with self._lock:
            entry = self.db.get_cache_entry(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= self.clock():
                self.db.delete_cache_entry(key)
                return None
            return value

    def put(self, key: str, value: dict[str, Any], ttl: timedelta = DEFAULT_TTL) -> None:
        with self._lock:
            self.db.put_cache_entry(key, value, self.clock() + ttl)

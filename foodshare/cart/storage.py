"""Durable key-value storage behind recipient baskets."""
import os
import threading
from collections import OrderedDict
from typing import Callable, Generic, Optional, Protocol, TypeVar

from foodshare.db import StorageKeys, TTL, get_redis_sync, redis_configured
from foodshare.errors import StorageError
from foodshare.logging import get_logger, sanitize_session_for_logging

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """Text blobs keyed by fixed names (cartItems, collectItems)."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStorage:
    """Process-local storage. Used in tests and when Redis is not configured."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class RedisStorage:
    """
    Upstash Redis storage scoped to one namespace.

    Reads and writes raise StorageError on any client failure; callers decide
    whether that means "empty" (loads) or a reported failure (writes).
    """

    def __init__(self, redis, namespace: str = "", ttl: Optional[int] = TTL.BASKET):
        self.redis = redis
        self.namespace = namespace
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(self._key(key))
        except Exception as e:
            raise StorageError(f"Failed to read {key}: {e}") from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            if self.ttl:
                self.redis.set(self._key(key), value, ex=self.ttl)
            else:
                self.redis.set(self._key(key), value)
        except Exception as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(self._key(key))
        except Exception as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e


SESSION_CACHE_SIZE = int(os.environ.get("SESSION_CACHE_SIZE", "1024"))

V = TypeVar("V")


class SessionCache(Generic[V]):
    """
    Per-session objects, least recently used evicted first.

    Session ids are client-supplied, so the cache never holds more than
    max_size entries.
    """

    def __init__(self, max_size: int = SESSION_CACHE_SIZE):
        self.max_size = max(1, max_size)
        self._entries: OrderedDict[str, V] = OrderedDict()
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str, factory: Callable[[], V]) -> V:
        with self._lock:
            value = self._entries.get(session_id)
            if value is not None:
                self._entries.move_to_end(session_id)
                return value

        created = factory()

        with self._lock:
            # Another thread may have created it meanwhile; first one wins
            value = self._entries.setdefault(session_id, created)
            self._entries.move_to_end(session_id)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted session %s from cache", sanitize_session_for_logging(evicted))
            return value

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_memory_sessions: SessionCache[MemoryStorage] = SessionCache()


def get_storage(session_id: str) -> KeyValueStorage:
    """Storage for one recipient session (Redis when configured)."""
    if redis_configured():
        return RedisStorage(get_redis_sync(), StorageKeys.session_namespace(session_id))
    return _memory_sessions.get_or_create(session_id, MemoryStorage)


def reset_memory_sessions() -> None:
    """Drop all in-memory sessions."""
    _memory_sessions.clear()

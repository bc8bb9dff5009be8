"""Tests for key-value storage backends"""
from unittest.mock import Mock

import pytest

from foodshare.cart import MemoryStorage, RedisStorage, SessionCache, get_storage
from foodshare.db import StorageKeys, TTL
from foodshare.errors import StorageError


class TestMemoryStorage:
    def test_get_set_delete(self):
        storage = MemoryStorage()
        assert storage.get("cartItems") is None
        storage.set("cartItems", "[]")
        assert storage.get("cartItems") == "[]"
        storage.delete("cartItems")
        assert storage.get("cartItems") is None

    def test_delete_missing_key(self):
        MemoryStorage().delete("missing")


class TestRedisStorage:
    def test_keys_are_namespaced(self):
        redis = Mock()
        redis.get.return_value = "[]"
        storage = RedisStorage(redis, StorageKeys.session_namespace("abc12345"))

        assert storage.get(StorageKeys.CART) == "[]"
        redis.get.assert_called_once_with("session:abc12345:cartItems")

    def test_set_applies_ttl(self):
        redis = Mock()
        storage = RedisStorage(redis, "ns:")
        storage.set("collectItems", "[]")
        redis.set.assert_called_once_with("ns:collectItems", "[]", ex=TTL.BASKET)

    def test_default_ttl_is_thirty_days(self):
        assert RedisStorage(Mock()).ttl == TTL.BASKET == 30 * 24 * 60 * 60

    def test_set_without_ttl(self):
        redis = Mock()
        RedisStorage(redis, "ns:", ttl=None).set("cartItems", "[]")
        redis.set.assert_called_once_with("ns:cartItems", "[]")

    def test_bytes_are_decoded(self):
        redis = Mock()
        redis.get.return_value = b"[1]"
        assert RedisStorage(redis).get("cartItems") == "[1]"

    @pytest.mark.parametrize("method,args", [("get", ("k",)), ("set", ("k", "v")), ("delete", ("k",))])
    def test_client_errors_become_storage_errors(self, method, args):
        redis = Mock()
        getattr(redis, method).side_effect = ConnectionError("down")
        with pytest.raises(StorageError):
            getattr(RedisStorage(redis), method)(*args)


def test_get_storage_falls_back_to_memory():
    first = get_storage("session-1234")
    assert isinstance(first, MemoryStorage)
    assert get_storage("session-1234") is first


class TestSessionCache:
    def test_reuses_entries(self):
        cache = SessionCache(max_size=2)
        first = cache.get_or_create("session-a", MemoryStorage)
        assert cache.get_or_create("session-a", MemoryStorage) is first

    def test_evicts_least_recently_used(self):
        cache = SessionCache(max_size=2)
        cache.get_or_create("session-a", MemoryStorage)
        cache.get_or_create("session-b", MemoryStorage)
        cache.get_or_create("session-a", MemoryStorage)
        cache.get_or_create("session-c", MemoryStorage)

        assert len(cache) == 2
        assert "session-a" in cache
        assert "session-b" not in cache

    def test_stays_bounded_under_rotating_ids(self):
        cache = SessionCache(max_size=50)
        for i in range(5000):
            cache.get_or_create(f"session-{i:08d}", MemoryStorage)
        assert len(cache) == 50


def test_memory_sessions_are_bounded(monkeypatch):
    from foodshare.cart import storage

    monkeypatch.setattr(storage, "_memory_sessions", SessionCache(max_size=10))
    for i in range(500):
        get_storage(f"session-{i:08d}")
    assert len(storage._memory_sessions) == 10

"""
Storage Module - Upstash Redis client

Provides the singleton sync Upstash Redis client that backs recipient
baskets (cart + collection list), plus the key names and TTLs used there.
"""

import os
from typing import Optional

from upstash_redis import Redis


# Upstash uses REST_URL and REST_TOKEN
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_sync_redis_client: Optional[Redis] = None


def redis_configured() -> bool:
    """True when both Upstash credentials are present."""
    return bool(UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN)


def get_redis_sync() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Basket operations are synchronous from the caller's point of view, so
    the sync client is used rather than upstash_redis.asyncio.
    """
    global _sync_redis_client

    if _sync_redis_client is None:
        if not redis_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _sync_redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _sync_redis_client


class StorageKeys:
    """Key names inside a recipient's storage namespace."""

    CART = "cartItems"
    COLLECT = "collectItems"

    # Namespace prefix for one recipient session
    SESSION = "session:"  # session:{session_id}:{key}

    @staticmethod
    def session_namespace(session_id: str) -> str:
        return f"{StorageKeys.SESSION}{session_id}:"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    BASKET = 2592000  # 30 days

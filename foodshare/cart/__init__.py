"""Basket package: line items, storage, cart store and collection list."""
from .events import CartChanged, ChangeFeed, CollectionChanged
from .models import CartItem, CollectItem, clamp_quantity
from .service import (
    AddResult,
    Basket,
    CartStore,
    CollectionList,
    MAX_CART_ITEMS,
    get_basket,
)
from .storage import KeyValueStorage, MemoryStorage, RedisStorage, SessionCache, get_storage

__all__ = [
    "AddResult",
    "Basket",
    "CartChanged",
    "CartItem",
    "CartStore",
    "ChangeFeed",
    "CollectItem",
    "CollectionChanged",
    "CollectionList",
    "KeyValueStorage",
    "MAX_CART_ITEMS",
    "MemoryStorage",
    "RedisStorage",
    "SessionCache",
    "clamp_quantity",
    "get_basket",
    "get_storage",
]

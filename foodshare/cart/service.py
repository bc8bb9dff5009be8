"""
Basket services: cart store and collection list over key-value storage.

Both lists are JSON arrays kept under fixed keys (cartItems, collectItems)
in the recipient's storage namespace. Storage is the only source of truth:
every operation re-reads it, mutates, and writes the whole list back.
"""
import json
import threading
from decimal import Decimal
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

from foodshare.clock import Clock, SystemClock
from foodshare.db import StorageKeys
from foodshare.errors import StorageError
from foodshare.logging import get_logger, sanitize_id_for_logging
from .events import CartChanged, ChangeFeed, CollectionChanged
from .models import CartItem, CollectItem, clamp_quantity
from .storage import KeyValueStorage, SessionCache, get_storage

logger = get_logger(__name__)

MAX_CART_ITEMS = 10

T = TypeVar("T", CartItem, CollectItem)


class AddResult(str, Enum):
    """Outcome of adding a listing to a basket list."""
    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    FULL = "full"

    @property
    def ok(self) -> bool:
        return self is AddResult.ADDED


class _StoredList(Generic[T]):
    """JSON list of line items persisted under a single storage key."""

    key: str = ""

    def __init__(self, storage: KeyValueStorage, item_type: type, clock: Optional[Clock] = None):
        self.storage = storage
        self.clock = clock or SystemClock()
        self._item_type = item_type
        self._lock = threading.RLock()

    def load(self) -> list[T]:
        """Read the list. Missing, unreadable or malformed data loads as empty."""
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            logger.warning("Could not read %s, treating as empty: %s", self.key, e)
            return []

        if not raw:
            return []

        try:
            records = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("Corrupted %s data, treating as empty: %s", self.key, e)
            return []

        if not isinstance(records, list):
            logger.warning("Unexpected %s payload type %s, treating as empty", self.key, type(records).__name__)
            return []

        items: list[T] = []
        for record in records:
            try:
                items.append(self._item_type.from_dict(record))
            except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
                logger.warning("Skipping malformed %s record: %s", self.key, e)
        return items

    def save(self, items: list[T]) -> None:
        """Persist the whole list. Raises StorageError on failure."""
        self.storage.set(self.key, json.dumps([item.to_dict() for item in items]))

    def items(self) -> list[T]:
        return self.load()

    def count(self) -> int:
        return len(self.load())

    def contains(self, listing_id) -> bool:
        return any(item.id == listing_id for item in self.load())

    def _remove(self, listing_id) -> list[T]:
        with self._lock:
            items = [item for item in self.load() if item.id != listing_id]
            self.save(items)
            return items

    def _clear(self) -> None:
        with self._lock:
            self.save([])


class CartStore(_StoredList[CartItem]):
    """
    Recipient cart.

    - At most one line per listing id; adding again is refused, not merged
    - At most 10 lines
    - Quantities are clamped into [1, 10]
    """

    key = StorageKeys.CART

    def __init__(self, storage: KeyValueStorage, clock: Optional[Clock] = None):
        super().__init__(storage, CartItem, clock)
        self.changes: ChangeFeed[CartChanged] = ChangeFeed(CartChanged(self.count()))

    def subscribe(self, listener: Callable[[CartChanged], None]) -> Callable[[], None]:
        return self.changes.subscribe(listener)

    def add(self, listing, quantity: int = 1) -> AddResult:
        """Add a listing snapshot as a new line."""
        with self._lock:
            items = self.load()
            if any(item.id == listing.id for item in items):
                return AddResult.ALREADY_PRESENT
            if len(items) >= MAX_CART_ITEMS:
                return AddResult.FULL

            items.append(CartItem.from_listing(listing, quantity, now=self.clock.now()))
            self.save(items)

        logger.info("Added listing %s to cart (%d items)", sanitize_id_for_logging(listing.id), len(items))
        self.changes.publish(CartChanged(len(items)))
        return AddResult.ADDED

    def remove(self, listing_id) -> None:
        """Remove a line if present."""
        items = self._remove(listing_id)
        self.changes.publish(CartChanged(len(items)))

    def set_quantity(self, listing_id, requested_quantity) -> None:
        """Set a line's quantity, clamped into [1, 10].

        The item count is unchanged, so no CartChanged is published.
        """
        quantity = clamp_quantity(requested_quantity)
        with self._lock:
            items = self.load()
            for item in items:
                if item.id == listing_id:
                    item.quantity = quantity
                    break
            self.save(items)

    def clear(self) -> None:
        self._clear()
        self.changes.publish(CartChanged(0))

    def compute_subtotal(self) -> Decimal:
        """Sum of cost * quantity over all lines."""
        return sum((item.line_total for item in self.load()), Decimal("0"))


class CollectionList(_StoredList[CollectItem]):
    """Listings a recipient has expressed interest in. De-duplicated, uncapped."""

    key = StorageKeys.COLLECT

    def __init__(self, storage: KeyValueStorage, clock: Optional[Clock] = None):
        super().__init__(storage, CollectItem, clock)
        self.changes: ChangeFeed[CollectionChanged] = ChangeFeed(CollectionChanged(self.count()))

    def subscribe(self, listener: Callable[[CollectionChanged], None]) -> Callable[[], None]:
        return self.changes.subscribe(listener)

    def add(self, listing) -> AddResult:
        with self._lock:
            items = self.load()
            if any(item.id == listing.id for item in items):
                return AddResult.ALREADY_PRESENT
            items.append(CollectItem.from_listing(listing, now=self.clock.now()))
            self.save(items)

        self.changes.publish(CollectionChanged(len(items)))
        return AddResult.ADDED

    def remove(self, listing_id) -> None:
        items = self._remove(listing_id)
        self.changes.publish(CollectionChanged(len(items)))

    def clear(self) -> None:
        self._clear()
        self.changes.publish(CollectionChanged(0))


class Basket:
    """A recipient's cart and collection list sharing one storage namespace."""

    def __init__(self, storage: KeyValueStorage, clock: Optional[Clock] = None):
        self.storage = storage
        self.cart = CartStore(storage, clock)
        self.collection = CollectionList(storage, clock)


# Recently used baskets, so change subscriptions outlive a single request
_baskets: SessionCache[Basket] = SessionCache()


def get_basket(session_id: str, clock: Optional[Clock] = None) -> Basket:
    """Get the Basket for a recipient session."""
    return _baskets.get_or_create(session_id, lambda: Basket(get_storage(session_id), clock))


def reset_baskets() -> None:
    _baskets.clear()

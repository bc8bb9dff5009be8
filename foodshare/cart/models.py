"""Basket line items with Decimal-based costs."""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from foodshare.money import multiply, to_decimal, to_float

MIN_QUANTITY = 1
MAX_QUANTITY = 10


def clamp_quantity(requested) -> int:
    """Clamp a requested quantity into [1, 10]; unparseable values become 1."""
    try:
        value = int(requested)
    except (TypeError, ValueError, OverflowError):
        return MIN_QUANTITY
    return max(MIN_QUANTITY, min(MAX_QUANTITY, value))


def _finite_decimal(value) -> Decimal:
    """Stored amount as Decimal. NaN and Infinity are rejected."""
    amount = to_decimal(value)
    if not amount.is_finite():
        raise ValueError(f"non-finite amount: {value!r}")
    return amount


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


@dataclass
class CartItem:
    """One cart line: a listing snapshot plus quantity."""
    id: int
    name: str
    category: str
    cost: Decimal
    quantity: int = 1
    added_at: str = ""

    def __post_init__(self):
        if not self.added_at:
            self.added_at = _timestamp(None)
        self.cost = to_decimal(self.cost)

    @property
    def line_total(self) -> Decimal:
        return multiply(self.cost, self.quantity)

    @classmethod
    def from_listing(cls, listing, quantity: int = 1, now: datetime | None = None) -> "CartItem":
        return cls(
            id=listing.id,
            name=listing.name,
            category=listing.category or "",
            cost=to_decimal(listing.cost),
            quantity=clamp_quantity(quantity),
            added_at=_timestamp(now),
        )

    def to_dict(self) -> dict:
        """Convert to the stored JSON record."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "cost": to_float(self.cost),
            "quantity": self.quantity,
            "addedAt": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """Create from a stored JSON record."""
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            category=str(data.get("category") or ""),
            cost=_finite_decimal(data.get("cost", 0)),
            quantity=clamp_quantity(data.get("quantity", 1)),
            added_at=data.get("addedAt", ""),
        )


@dataclass
class CollectItem:
    """Collection list entry. quantity carries the listing's cost/weight."""
    id: int
    name: str
    category: str
    quantity: Decimal
    added_at: str = ""

    def __post_init__(self):
        if not self.added_at:
            self.added_at = _timestamp(None)
        self.quantity = to_decimal(self.quantity)

    @classmethod
    def from_listing(cls, listing, now: datetime | None = None) -> "CollectItem":
        return cls(
            id=listing.id,
            name=listing.name,
            category=listing.category or "",
            quantity=to_decimal(listing.cost),
            added_at=_timestamp(now),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "quantity": to_float(self.quantity),
            "addedAt": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CollectItem":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            category=str(data.get("category") or ""),
            quantity=_finite_decimal(data.get("quantity", 0)),
            added_at=data.get("addedAt", ""),
        )

"""
Cart/Catalog Bridge

Connects the remote catalog with a recipient's basket:
- Browsing: fetch all listings, annotate expiry, hide expired ones, then
  search/filter/sort
- Detail: one listing (expired ones still shown) plus related listings
- Adding to cart and to the collection list
- Checkout: static payment instructions, confirmation clears the cart
"""
import asyncio
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from urllib.parse import urlencode

from foodshare.cart import AddResult, Basket
from foodshare.clock import Clock, SystemClock, ensure_utc
from foodshare.errors import StorageError
from foodshare.logging import get_logger, sanitize_id_for_logging
from foodshare.money import DEFAULT_CURRENCY, round_money
from .client import CatalogClient
from .expiry import expires_at, is_expired
from .models import Listing, ListingView

logger = get_logger(__name__)

PAYMENT_UPI_ID = os.environ.get("PAYMENT_UPI_ID", "foodshare@bank")
PAYMENT_PAYEE_NAME = os.environ.get("PAYMENT_PAYEE_NAME", "FoodShare")
PAYMENT_BANK_NAME = os.environ.get("PAYMENT_BANK_NAME", "")
PAYMENT_BANK_ACCOUNT = os.environ.get("PAYMENT_BANK_ACCOUNT", "")
PAYMENT_BANK_IFSC = os.environ.get("PAYMENT_BANK_IFSC", "")

RELATED_LIMIT = 4

SORT_OPTIONS = ("default", "priceLow", "priceHigh", "newest", "quantityLow", "quantityHigh")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class BrowseFilters:
    """Recipient search controls."""
    query: str = ""
    category: Optional[str] = None
    min_cost: Optional[Decimal] = None
    max_cost: Optional[Decimal] = None
    sort: str = "default"


@dataclass
class BrowseResult:
    """Visible listings plus catalog stats."""
    listings: list[ListingView]
    total: int
    active: int
    expired: int
    categories: list[str]


@dataclass
class DetailResult:
    listing: ListingView
    related: list[ListingView]


@dataclass
class CollectResult:
    """Outcome of adding a listing to the collection list (and cart)."""
    collection: AddResult
    cart: AddResult


@dataclass
class CheckoutLine:
    id: int
    name: str
    quantity: int
    line_total: Decimal


@dataclass
class CheckoutSummary:
    """Payment instruction screen. No payment is processed."""
    lines: list[CheckoutLine]
    total: Decimal
    currency: str = DEFAULT_CURRENCY
    upi_id: str = PAYMENT_UPI_ID
    upi_uri: str = ""
    bank: dict = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.lines


def _matches(listing: Listing, filters: BrowseFilters) -> bool:
    if filters.category and listing.category != filters.category:
        return False

    query = (filters.query or "").strip().lower()
    if query:
        in_name = query in listing.name.lower()
        in_description = query in (listing.description or "").lower()
        if not (in_name or in_description):
            return False

    if filters.min_cost is not None and listing.cost < filters.min_cost:
        return False
    if filters.max_cost is not None and listing.cost > filters.max_cost:
        return False
    return True


def _sort(views: list[ListingView], sort: str) -> list[ListingView]:
    if sort in ("priceLow", "quantityLow"):
        return sorted(views, key=lambda v: v.listing.cost)
    if sort in ("priceHigh", "quantityHigh"):
        return sorted(views, key=lambda v: v.listing.cost, reverse=True)
    if sort == "newest":
        return sorted(
            views,
            key=lambda v: ensure_utc(v.listing.created_at) if v.listing.created_at else _EPOCH,
            reverse=True,
        )
    return views


class CartCatalogBridge:
    """Catalog reads annotated with expiry, and basket writes driven by them."""

    def __init__(self, client: CatalogClient, clock: Optional[Clock] = None):
        self.client = client
        self.clock = clock or SystemClock()

    def annotate(self, listing: Listing, now: Optional[datetime] = None) -> ListingView:
        now = now or self.clock.now()
        return ListingView(
            listing=listing,
            expired=is_expired(listing, now),
            expires_at=expires_at(listing),
        )

    async def browse(self, filters: Optional[BrowseFilters] = None) -> BrowseResult:
        """Active listings matching filters. Expiry is recomputed on every call."""
        filters = filters or BrowseFilters()
        listings = await self.client.fetch_listings()

        now = self.clock.now()
        views = [self.annotate(listing, now) for listing in listings]
        active = [view for view in views if not view.expired]

        visible = [view for view in active if _matches(view.listing, filters)]
        categories = sorted({listing.category for listing in listings if listing.category})

        return BrowseResult(
            listings=_sort(visible, filters.sort),
            total=len(views),
            active=len(active),
            expired=len(views) - len(active),
            categories=categories,
        )

    async def detail(self, listing_id: int) -> DetailResult:
        """A single listing, expired or not, with same-category listings."""
        listing = await self.client.fetch_listing(listing_id)
        now = self.clock.now()

        related: list[ListingView] = []
        if listing.category:
            others = await self.client.fetch_listings()
            related = [
                self.annotate(other, now)
                for other in others
                if other.category == listing.category and other.id != listing.id
            ][:RELATED_LIMIT]

        return DetailResult(listing=self.annotate(listing, now), related=related)

    async def add_to_cart(self, basket: Basket, listing_id: int, quantity: int = 1) -> AddResult:
        listing = await self.client.fetch_listing(listing_id)
        return await asyncio.to_thread(basket.cart.add, listing, quantity)

    async def add_to_collection(self, basket: Basket, listing_id: int) -> CollectResult:
        """Add to the collection list and the cart.

        If the cart write fails, a collection entry added by this call is
        removed again so the two lists do not diverge.
        """
        listing = await self.client.fetch_listing(listing_id)

        collection_result = await asyncio.to_thread(basket.collection.add, listing)
        try:
            cart_result = await asyncio.to_thread(basket.cart.add, listing)
        except StorageError:
            if collection_result.ok:
                logger.warning(
                    "Cart write failed, rolling back collection entry %s",
                    sanitize_id_for_logging(listing.id),
                )
                await asyncio.to_thread(basket.collection.remove, listing.id)
            raise

        return CollectResult(collection=collection_result, cart=cart_result)

    @staticmethod
    def checkout(basket: Basket) -> CheckoutSummary:
        items = basket.cart.items()
        lines = [
            CheckoutLine(id=item.id, name=item.name, quantity=item.quantity, line_total=round_money(item.line_total))
            for item in items
        ]
        total = round_money(sum((item.line_total for item in items), Decimal("0")))

        upi_uri = "upi://pay?" + urlencode({
            "pa": PAYMENT_UPI_ID,
            "pn": PAYMENT_PAYEE_NAME,
            "am": f"{total:.2f}",
            "cu": DEFAULT_CURRENCY,
        })
        bank = {
            "bank_name": PAYMENT_BANK_NAME,
            "account_number": PAYMENT_BANK_ACCOUNT,
            "ifsc": PAYMENT_BANK_IFSC,
        }
        return CheckoutSummary(lines=lines, total=total, upi_uri=upi_uri, bank=bank)

    @staticmethod
    def confirm_checkout(basket: Basket) -> None:
        """Payment is confirmed by the recipient; empty the cart."""
        basket.cart.clear()
        logger.info("Checkout confirmed, cart cleared")

"""Donor operations: listing submission and a donor's dashboard counts."""
from dataclasses import dataclass
from typing import Optional

from foodshare.clock import Clock, SystemClock
from foodshare.errors import (
    ERROR_IMAGE_REQUIRED,
    ERROR_INVALID_COST,
    ERROR_INVALID_TIMER,
    ListingValidationError,
)
from .client import CatalogClient
from .expiry import is_expired
from .models import NewListing


@dataclass
class DonorSummary:
    total: int
    with_timer: int
    active: int
    expired: int


def validate_new_listing(new_listing: NewListing) -> None:
    """Reject listings the catalog would store in an unusable state."""
    if new_listing.timer is None or new_listing.timer <= 0:
        raise ListingValidationError(ERROR_INVALID_TIMER)
    if new_listing.cost < 0:
        raise ListingValidationError(ERROR_INVALID_COST)
    if not new_listing.image:
        raise ListingValidationError(ERROR_IMAGE_REQUIRED)


async def create_listing(client: CatalogClient, new_listing: NewListing) -> str:
    validate_new_listing(new_listing)
    return await client.create_listing(new_listing)


async def donor_summary(client: CatalogClient, seller_id: int, clock: Optional[Clock] = None) -> DonorSummary:
    clock = clock or SystemClock()
    listings = await client.fetch_listings_by_seller(seller_id)
    now = clock.now()
    expired = sum(1 for listing in listings if is_expired(listing, now))
    return DonorSummary(
        total=len(listings),
        with_timer=sum(1 for listing in listings if listing.timer and listing.timer > 0),
        active=len(listings) - expired,
        expired=expired,
    )

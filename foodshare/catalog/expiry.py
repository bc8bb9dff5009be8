"""Listing expiry: a listing with created_at and timer expires timer minutes after creation."""
from datetime import datetime, timedelta
from typing import Optional

from foodshare.clock import ensure_utc


def expires_at(listing) -> Optional[datetime]:
    """Expiry instant, or None for listings that never expire."""
    if listing.created_at is None or not listing.timer or listing.timer <= 0:
        return None
    return ensure_utc(listing.created_at) + timedelta(minutes=listing.timer)


def is_expired(listing, now: datetime) -> bool:
    """True once now is strictly past the expiry instant.

    Listings missing created_at or timer never expire.
    """
    deadline = expires_at(listing)
    if deadline is None:
        return False
    return ensure_utc(now) > deadline

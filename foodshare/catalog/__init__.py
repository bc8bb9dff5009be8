"""Catalog package: listing models, expiry, API client and basket bridge."""
from .bridge import BrowseFilters, BrowseResult, CartCatalogBridge, CheckoutSummary, CollectResult, DetailResult
from .client import CatalogClient
from .expiry import expires_at, is_expired
from .models import Buyer, Listing, ListingView, NewListing, Seller

__all__ = [
    "BrowseFilters",
    "BrowseResult",
    "Buyer",
    "CartCatalogBridge",
    "CatalogClient",
    "CheckoutSummary",
    "CollectResult",
    "DetailResult",
    "Listing",
    "ListingView",
    "NewListing",
    "Seller",
    "expires_at",
    "is_expired",
]

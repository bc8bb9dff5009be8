"""
Common Errors

Centralized error messages and the exception hierarchy shared by the
catalog client, storage layer and routers.
"""

# Listing errors
ERROR_LISTING_NOT_FOUND = "Listing not found"
ERROR_INVALID_TIMER = "Please set a valid timer (in minutes)."
ERROR_INVALID_COST = "Cost must be a non-negative number"
ERROR_IMAGE_REQUIRED = "A listing image is required"

# Cart errors
ERROR_CART_FULL = "Cart is full! Maximum 10 items allowed. Please remove some before adding more."
ERROR_ALREADY_IN_CART = "This item is already in your cart"
ERROR_ALREADY_IN_COLLECTION = "This item is already in your collection list"
ERROR_CART_EMPTY = "Your cart is empty"

# Account errors
ERROR_SELLER_NOT_FOUND = "Seller not found"
ERROR_BUYER_NOT_FOUND = "Buyer not found"

# Generic errors
ERROR_CATALOG_UNAVAILABLE = "Catalog service unavailable"
ERROR_STORAGE_UNAVAILABLE = "Storage unavailable"
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_SESSION_REQUIRED = "X-Session-Id header is required"


class FoodShareError(Exception):
    """Base class for all FoodShare errors."""


class StorageError(FoodShareError):
    """Durable key-value storage could not be written or reached."""


class CatalogError(FoodShareError):
    """Base class for remote catalog/account API failures."""


class CatalogUnavailable(CatalogError):
    """Transport failure or unexpected status from the catalog API."""

    def __init__(self, message: str = ERROR_CATALOG_UNAVAILABLE, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ListingNotFound(CatalogError):
    """The catalog API has no listing with the requested id."""

    def __init__(self, listing_id):
        super().__init__(f"{ERROR_LISTING_NOT_FOUND}: {listing_id}")
        self.listing_id = listing_id


class ListingValidationError(FoodShareError, ValueError):
    """Donor-submitted listing failed local validation."""

"""
Shared Dependencies for Routers

Lazy-loaded singletons. Tests replace them via app.dependency_overrides.
"""

from typing import Optional

from fastapi import Depends

from foodshare.auth import get_session_id
from foodshare.cart import Basket, get_basket
from foodshare.catalog import CartCatalogBridge, CatalogClient
from foodshare.clock import Clock, SystemClock


# ==================== LAZY SINGLETONS ====================

_catalog_client: Optional[CatalogClient] = None
_clock: Optional[Clock] = None


def get_catalog_client() -> CatalogClient:
    """Get or create CatalogClient singleton"""
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = CatalogClient()
    return _catalog_client


def get_clock() -> Clock:
    global _clock
    if _clock is None:
        _clock = SystemClock()
    return _clock


def get_bridge(
    client: CatalogClient = Depends(get_catalog_client),
    clock: Clock = Depends(get_clock),
) -> CartCatalogBridge:
    return CartCatalogBridge(client, clock)


def get_session_basket(
    session_id: str = Depends(get_session_id),
    clock: Clock = Depends(get_clock),
) -> Basket:
    return get_basket(session_id, clock)


# ==================== SHUTDOWN HELPERS ====================

async def shutdown_services():
    """Close the catalog HTTP client."""
    global _catalog_client
    if _catalog_client is not None:
        try:
            await _catalog_client.aclose()
        finally:
            _catalog_client = None

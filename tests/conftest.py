"""Pytest configuration and fixtures"""
import os
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

# Set test environment variables before foodshare modules are imported
os.environ["UPSTASH_REDIS_REST_URL"] = ""
os.environ["UPSTASH_REDIS_REST_TOKEN"] = ""
os.environ.setdefault("ADMIN_API_KEY", "test_admin_key")
os.environ.setdefault("CATALOG_API_URL", "http://catalog.test")

from foodshare.cart import Basket, MemoryStorage  # noqa: E402
from foodshare.cart.service import reset_baskets  # noqa: E402
from foodshare.cart.storage import reset_memory_sessions  # noqa: E402
from foodshare.catalog import CatalogClient, Listing  # noqa: E402
from foodshare.clock import FixedClock  # noqa: E402

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_listing(listing_id=1, **overrides) -> Listing:
    """Build a listing with sensible defaults."""
    data = {
        "id": listing_id,
        "name": f"Listing {listing_id}",
        "category": "Bakery",
        "description": "Fresh bread from today",
        "cost": 50,
        "createdAt": None,
        "timer": None,
    }
    data.update(overrides)
    return Listing.model_validate(data)


@pytest.fixture(autouse=True)
def reset_sessions():
    """Isolate in-process baskets between tests"""
    reset_baskets()
    reset_memory_sessions()
    yield
    reset_baskets()
    reset_memory_sessions()


@pytest.fixture
def fixed_clock():
    return FixedClock(NOW)


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def basket(memory_storage, fixed_clock):
    return Basket(memory_storage, fixed_clock)


@pytest.fixture
def sample_listing():
    """Listing with a 30 minute timer created at NOW"""
    return make_listing(
        7,
        name="Vegetable Biryani",
        category="Cooked Meals",
        description="Serves 5, packed in foil trays",
        cost=120,
        createdAt=NOW.isoformat(),
        timer=30,
    )


@pytest.fixture
def mock_catalog_client():
    """Mock catalog API client"""
    client = Mock(spec=CatalogClient)
    client.fetch_listings = AsyncMock(return_value=[])
    client.fetch_listing = AsyncMock()
    client.fetch_listings_by_seller = AsyncMock(return_value=[])
    client.fetch_image = AsyncMock(return_value=(b"\x89PNG", "image/png"))
    client.create_listing = AsyncMock(return_value="Product Added Successfully")
    client.fetch_sellers = AsyncMock(return_value=[])
    client.fetch_buyers = AsyncMock(return_value=[])
    client.approve_seller = AsyncMock(return_value="Seller Approved Successfully")
    client.reject_seller = AsyncMock(return_value="Seller Rejected Successfully")
    client.delete_seller = AsyncMock(return_value="Seller Deleted Successfully")
    client.delete_buyer = AsyncMock(return_value="Buyer Deleted Successfully")
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def cost_scenario_listings():
    return [make_listing(1, cost=Decimal("50")), make_listing(2, cost=Decimal("30"))]

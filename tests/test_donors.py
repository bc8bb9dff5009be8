"""Tests for donor operations"""
from datetime import timedelta
from decimal import Decimal

import pytest

from foodshare.catalog import NewListing
from foodshare.catalog.donors import create_listing, donor_summary, validate_new_listing
from foodshare.errors import ListingValidationError
from conftest import NOW, make_listing


def new_listing(**overrides) -> NewListing:
    data = {
        "category": "Bakery",
        "name": "Croissants",
        "description": "Day old",
        "cost": Decimal("15"),
        "seller_id": 3,
        "timer": 120,
        "image": b"jpeg-bytes",
    }
    data.update(overrides)
    return NewListing(**data)


@pytest.mark.parametrize("timer", [0, -5])
def test_invalid_timer_rejected(timer):
    with pytest.raises(ListingValidationError):
        validate_new_listing(new_listing(timer=timer))


def test_negative_cost_rejected():
    with pytest.raises(ListingValidationError):
        validate_new_listing(new_listing(cost=Decimal("-1")))


def test_missing_image_rejected():
    with pytest.raises(ListingValidationError):
        validate_new_listing(new_listing(image=b""))


@pytest.mark.asyncio
async def test_create_listing_forwards_valid_listing(mock_catalog_client):
    message = await create_listing(mock_catalog_client, new_listing())
    assert message == "Product Added Successfully"
    mock_catalog_client.create_listing.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_listing_does_not_forward_invalid(mock_catalog_client):
    with pytest.raises(ListingValidationError):
        await create_listing(mock_catalog_client, new_listing(timer=0))
    mock_catalog_client.create_listing.assert_not_awaited()


@pytest.mark.asyncio
async def test_donor_summary(mock_catalog_client, fixed_clock):
    mock_catalog_client.fetch_listings_by_seller.return_value = [
        make_listing(1, createdAt=(NOW - timedelta(hours=3)).isoformat(), timer=60),
        make_listing(2, createdAt=NOW.isoformat(), timer=60),
        make_listing(3),
    ]

    summary = await donor_summary(mock_catalog_client, 3, fixed_clock)

    assert (summary.total, summary.with_timer, summary.active, summary.expired) == (3, 2, 2, 1)
    mock_catalog_client.fetch_listings_by_seller.assert_awaited_once_with(3)

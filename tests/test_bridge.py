"""Tests for the cart/catalog bridge"""
import threading
from datetime import timedelta
from decimal import Decimal

import pytest

from foodshare.cart import AddResult, MemoryStorage, Basket
from foodshare.catalog import BrowseFilters, CartCatalogBridge
from foodshare.errors import ListingNotFound, StorageError
from foodshare.db import StorageKeys
from conftest import NOW, make_listing


@pytest.fixture
def catalog(mock_catalog_client):
    expired = make_listing(1, name="Old soup", category="Cooked Meals", cost=10,
                           createdAt=(NOW - timedelta(hours=2)).isoformat(), timer=60)
    fresh = make_listing(2, name="Paneer curry", category="Cooked Meals", cost=80,
                         description="Mild, no onion", createdAt=(NOW - timedelta(minutes=10)).isoformat(), timer=60)
    bread = make_listing(3, name="Brown bread", category="Bakery", cost=25,
                         createdAt=(NOW - timedelta(minutes=5)).isoformat())
    apples = make_listing(4, name="Apples", category="Fruit", cost=40, description="Crisp red apples")
    mock_catalog_client.fetch_listings.return_value = [expired, fresh, bread, apples]
    listings = {listing.id: listing for listing in [expired, fresh, bread, apples]}

    async def fetch_listing(listing_id):
        if listing_id not in listings:
            raise ListingNotFound(listing_id)
        return listings[listing_id]

    mock_catalog_client.fetch_listing.side_effect = fetch_listing
    return mock_catalog_client


@pytest.fixture
def bridge(catalog, fixed_clock):
    return CartCatalogBridge(catalog, fixed_clock)


class TestBrowse:
    @pytest.mark.asyncio
    async def test_expired_listings_are_hidden(self, bridge):
        result = await bridge.browse()

        assert [view.listing.id for view in result.listings] == [2, 3, 4]
        assert (result.total, result.active, result.expired) == (4, 3, 1)
        assert result.categories == ["Bakery", "Cooked Meals", "Fruit"]

    @pytest.mark.asyncio
    async def test_expiry_recomputed_each_call(self, bridge, fixed_clock):
        fixed_clock.advance(minutes=51)
        result = await bridge.browse()
        assert [view.listing.id for view in result.listings] == [3, 4]

    @pytest.mark.asyncio
    async def test_search_matches_name_and_description(self, bridge):
        by_name = await bridge.browse(BrowseFilters(query="BREAD"))
        by_description = await bridge.browse(BrowseFilters(query="onion"))

        assert [view.listing.id for view in by_name.listings] == [3]
        assert [view.listing.id for view in by_description.listings] == [2]

    @pytest.mark.asyncio
    async def test_search_does_not_surface_expired(self, bridge):
        result = await bridge.browse(BrowseFilters(query="soup"))
        assert result.listings == []

    @pytest.mark.asyncio
    async def test_category_and_cost_range(self, bridge):
        result = await bridge.browse(BrowseFilters(min_cost=Decimal("30"), max_cost=Decimal("80")))
        assert [view.listing.id for view in result.listings] == [2, 4]

        result = await bridge.browse(BrowseFilters(category="Bakery"))
        assert [view.listing.id for view in result.listings] == [3]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sort,expected", [
        ("priceLow", [3, 4, 2]),
        ("priceHigh", [2, 4, 3]),
        ("quantityHigh", [2, 4, 3]),
        ("newest", [3, 2, 4]),
        ("default", [2, 3, 4]),
    ])
    async def test_sorting(self, bridge, sort, expected):
        result = await bridge.browse(BrowseFilters(sort=sort))
        assert [view.listing.id for view in result.listings] == expected


class TestDetail:
    @pytest.mark.asyncio
    async def test_expired_listing_still_renders(self, bridge):
        result = await bridge.detail(1)

        assert result.listing.listing.id == 1
        assert result.listing.expired is True
        assert [view.listing.id for view in result.related] == [2]

    @pytest.mark.asyncio
    async def test_related_limited_to_four(self, catalog, fixed_clock):
        listings = [make_listing(i, category="Bakery") for i in range(1, 8)]
        catalog.fetch_listings.return_value = listings
        catalog.fetch_listing.side_effect = None
        catalog.fetch_listing.return_value = listings[0]

        result = await CartCatalogBridge(catalog, fixed_clock).detail(1)

        assert [view.listing.id for view in result.related] == [2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_unknown_listing(self, bridge):
        with pytest.raises(ListingNotFound):
            await bridge.detail(404)


class TestBasketOperations:
    @pytest.mark.asyncio
    async def test_add_to_cart(self, bridge, basket):
        assert await bridge.add_to_cart(basket, 2) is AddResult.ADDED
        assert await bridge.add_to_cart(basket, 2) is AddResult.ALREADY_PRESENT
        assert basket.cart.items()[0].cost == Decimal("80")

    @pytest.mark.asyncio
    async def test_add_to_collection_also_adds_to_cart(self, bridge, basket):
        result = await bridge.add_to_collection(basket, 3)

        assert result.collection is AddResult.ADDED
        assert result.cart is AddResult.ADDED
        assert basket.collection.count() == 1
        assert basket.cart.count() == 1

    @pytest.mark.asyncio
    async def test_add_to_collection_when_cart_has_item(self, bridge, basket):
        await bridge.add_to_cart(basket, 3)
        result = await bridge.add_to_collection(basket, 3)

        assert result.collection is AddResult.ADDED
        assert result.cart is AddResult.ALREADY_PRESENT

    @pytest.mark.asyncio
    async def test_collection_rolled_back_when_cart_write_fails(self, bridge, fixed_clock):
        class CartWritesFail(MemoryStorage):
            def set(self, key, value):
                if key == StorageKeys.CART:
                    raise StorageError("cart write refused")
                super().set(key, value)

        basket = Basket(CartWritesFail(), fixed_clock)

        with pytest.raises(StorageError):
            await bridge.add_to_collection(basket, 3)

        assert basket.collection.count() == 0
        assert basket.cart.count() == 0

    @pytest.mark.asyncio
    async def test_basket_writes_run_off_the_event_loop(self, bridge, fixed_clock):
        writer_threads = []

        class RecordingStorage(MemoryStorage):
            def set(self, key, value):
                writer_threads.append(threading.get_ident())
                super().set(key, value)

        basket = Basket(RecordingStorage(), fixed_clock)

        await bridge.add_to_cart(basket, 2)
        await bridge.add_to_collection(basket, 3)

        assert len(writer_threads) == 3
        assert threading.get_ident() not in writer_threads

    @pytest.mark.asyncio
    async def test_checkout_and_confirm(self, bridge, basket, cost_scenario_listings):
        first, second = cost_scenario_listings
        basket.cart.add(first)
        basket.cart.add(second)
        basket.cart.set_quantity(1, 2)

        summary = bridge.checkout(basket)

        assert summary.total == Decimal("130.00")
        assert [(line.id, line.quantity) for line in summary.lines] == [(1, 2), (2, 1)]
        assert "am=130.00" in summary.upi_uri
        assert summary.upi_uri.startswith("upi://pay?")

        bridge.confirm_checkout(basket)
        assert basket.cart.items() == []

    def test_checkout_empty_cart(self, bridge, basket):
        assert bridge.checkout(basket).is_empty

"""
Collection Router

Collection list endpoints. Adding to the collection list also adds the
listing to the cart.
"""
import asyncio

from fastapi import APIRouter, Depends, HTTPException

from foodshare.cart import AddResult, Basket
from foodshare.catalog import CartCatalogBridge
from foodshare.errors import (
    ERROR_ALREADY_IN_COLLECTION,
    ERROR_CATALOG_UNAVAILABLE,
    ERROR_LISTING_NOT_FOUND,
    ERROR_STORAGE_UNAVAILABLE,
    CatalogUnavailable,
    ListingNotFound,
    StorageError,
)
from foodshare.logging import get_logger
from .deps import get_bridge, get_session_basket
from .models import AddToCollectionRequest

logger = get_logger(__name__)

router = APIRouter(tags=["collection"])


def format_collection_response(basket: Basket) -> dict:
    items = basket.collection.items()
    return {
        "items": [item.to_dict() for item in items],
        "collect_count": len(items),
        "cart_count": basket.cart.count(),
    }


@router.get("/collection")
def get_collection(basket: Basket = Depends(get_session_basket)):
    return format_collection_response(basket)


@router.post("/collection/add")
async def add_to_collection(
    request: AddToCollectionRequest,
    basket: Basket = Depends(get_session_basket),
    bridge: CartCatalogBridge = Depends(get_bridge),
):
    try:
        result = await bridge.add_to_collection(basket, request.listing_id)
    except ListingNotFound:
        raise HTTPException(status_code=404, detail=ERROR_LISTING_NOT_FOUND)
    except CatalogUnavailable as e:
        logger.error(f"Failed to fetch listing for collection: {e}")
        raise HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)
    except StorageError as e:
        logger.error(f"Failed to save collection list: {e}")
        lists = await asyncio.to_thread(format_collection_response, basket)
        return {"success": False, "reason": ERROR_STORAGE_UNAVAILABLE, **lists}

    added = result.collection is AddResult.ADDED
    lists = await asyncio.to_thread(format_collection_response, basket)
    return {
        "success": added,
        "message": "Added to collection list!" if added else ERROR_ALREADY_IN_COLLECTION,
        "collection_result": result.collection.value,
        "cart_result": result.cart.value,
        **lists,
    }


@router.delete("/collection/item/{listing_id}")
def remove_collection_item(listing_id: int, basket: Basket = Depends(get_session_basket)):
    try:
        basket.collection.remove(listing_id)
    except StorageError as e:
        logger.error(f"Failed to remove collection item: {e}")
        return {"success": False, "reason": ERROR_STORAGE_UNAVAILABLE, **format_collection_response(basket)}
    return {"success": True, **format_collection_response(basket)}

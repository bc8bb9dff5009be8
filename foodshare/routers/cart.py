"""
Cart Router

Recipient cart endpoints. Cart rules (duplicate, full) are reported in the
body with success=false rather than as HTTP errors; the cart in the
response is always the current stored state.
"""
import asyncio

from fastapi import APIRouter, Depends, HTTPException

from foodshare.cart import AddResult, Basket
from foodshare.catalog import CartCatalogBridge
from foodshare.errors import (
    ERROR_ALREADY_IN_CART,
    ERROR_CART_EMPTY,
    ERROR_CART_FULL,
    ERROR_CATALOG_UNAVAILABLE,
    ERROR_LISTING_NOT_FOUND,
    ERROR_STORAGE_UNAVAILABLE,
    CatalogUnavailable,
    ListingNotFound,
    StorageError,
)
from foodshare.logging import get_logger
from foodshare.money import DEFAULT_CURRENCY, format_money, round_money, to_float
from .deps import get_bridge, get_session_basket
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])

ADD_RESULT_MESSAGES = {
    AddResult.ADDED: "Added to cart!",
    AddResult.ALREADY_PRESENT: ERROR_ALREADY_IN_CART,
    AddResult.FULL: ERROR_CART_FULL,
}


def format_cart_response(basket: Basket) -> dict:
    """Current cart with line totals and subtotal."""
    items = basket.cart.items()
    subtotal = round_money(sum((item.line_total for item in items), 0))
    return {
        "items": [
            {
                **item.to_dict(),
                "line_total": to_float(round_money(item.line_total)),
            }
            for item in items
        ],
        "cart_count": len(items),
        "subtotal": to_float(subtotal),
        "subtotal_display": format_money(subtotal),
        "currency": DEFAULT_CURRENCY,
    }


@router.get("/cart")
def get_cart(basket: Basket = Depends(get_session_basket)):
    return format_cart_response(basket)


@router.post("/cart/add")
async def add_to_cart(
    request: AddToCartRequest,
    basket: Basket = Depends(get_session_basket),
    bridge: CartCatalogBridge = Depends(get_bridge),
):
    """Add a listing to the cart (one line per listing, max 10 lines)."""
    try:
        result = await bridge.add_to_cart(basket, request.listing_id, request.quantity)
    except ListingNotFound:
        raise HTTPException(status_code=404, detail=ERROR_LISTING_NOT_FOUND)
    except CatalogUnavailable as e:
        logger.error(f"Failed to fetch listing for cart: {e}")
        raise HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)
    except StorageError as e:
        logger.error(f"Failed to save cart: {e}")
        cart = await asyncio.to_thread(format_cart_response, basket)
        return {"success": False, "reason": ERROR_STORAGE_UNAVAILABLE, **cart}

    # Blocking storage read
    cart = await asyncio.to_thread(format_cart_response, basket)
    return {
        "success": result.ok,
        "result": result.value,
        "reason": None if result.ok else ADD_RESULT_MESSAGES[result],
        "message": ADD_RESULT_MESSAGES[result],
        **cart,
    }


@router.patch("/cart/item")
def update_cart_item(request: UpdateCartItemRequest, basket: Basket = Depends(get_session_basket)):
    """Set quantity (clamped into 1..10)."""
    try:
        basket.cart.set_quantity(request.listing_id, request.quantity)
    except StorageError as e:
        logger.error(f"Failed to update cart item: {e}")
        return {"success": False, "reason": ERROR_STORAGE_UNAVAILABLE, **format_cart_response(basket)}
    return {"success": True, **format_cart_response(basket)}


@router.delete("/cart/item/{listing_id}")
def remove_cart_item(listing_id: int, basket: Basket = Depends(get_session_basket)):
    try:
        basket.cart.remove(listing_id)
    except StorageError as e:
        logger.error(f"Failed to remove cart item: {e}")
        return {"success": False, "reason": ERROR_STORAGE_UNAVAILABLE, **format_cart_response(basket)}
    return {"success": True, "message": "Item removed from cart", **format_cart_response(basket)}


@router.delete("/cart")
def clear_cart(basket: Basket = Depends(get_session_basket)):
    try:
        basket.cart.clear()
    except StorageError as e:
        logger.error(f"Failed to clear cart: {e}")
        return {"success": False, "reason": ERROR_STORAGE_UNAVAILABLE, **format_cart_response(basket)}
    return {"success": True, "message": "Cart has been cleared", **format_cart_response(basket)}


@router.post("/cart/checkout")
def checkout(basket: Basket = Depends(get_session_basket)):
    """Payment instructions for the current cart. Nothing is charged."""
    summary = CartCatalogBridge.checkout(basket)
    if summary.is_empty:
        raise HTTPException(status_code=400, detail=ERROR_CART_EMPTY)

    return {
        "lines": [
            {
                "id": line.id,
                "name": line.name,
                "quantity": line.quantity,
                "line_total": to_float(line.line_total),
            }
            for line in summary.lines
        ],
        "total": to_float(summary.total),
        "total_display": format_money(summary.total, summary.currency),
        "currency": summary.currency,
        "payment_methods": {
            "upi": {"upi_id": summary.upi_id, "uri": summary.upi_uri},
            "bank": summary.bank,
        },
    }


@router.post("/cart/checkout/confirm")
def confirm_checkout(basket: Basket = Depends(get_session_basket)):
    """Recipient reports the payment done; the cart is emptied."""
    try:
        CartCatalogBridge.confirm_checkout(basket)
    except StorageError as e:
        logger.error(f"Failed to clear cart after checkout: {e}")
        return {"success": False, "reason": ERROR_STORAGE_UNAVAILABLE, **format_cart_response(basket)}
    return {
        "success": True,
        "message": "Payment successful! Thank you for supporting food rescue.",
        **format_cart_response(basket),
    }

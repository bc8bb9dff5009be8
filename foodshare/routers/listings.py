"""
Listings Router

Recipient browsing and donor listing submission. Expired listings are hidden
from browsing but still served by the detail endpoint.
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from foodshare.catalog import BrowseFilters, CartCatalogBridge, CatalogClient, NewListing
from foodshare.catalog.bridge import SORT_OPTIONS
from foodshare.catalog.donors import create_listing, donor_summary
from foodshare.clock import Clock
from foodshare.errors import (
    ERROR_CATALOG_UNAVAILABLE,
    ERROR_LISTING_NOT_FOUND,
    CatalogUnavailable,
    ListingNotFound,
    ListingValidationError,
)
from foodshare.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from .deps import get_bridge, get_catalog_client, get_clock

logger = get_logger(__name__)

router = APIRouter(tags=["listings"])


def _catalog_http_error(e: Exception) -> HTTPException:
    """Map catalog failures to an HTTP error with a readable message."""
    if isinstance(e, ListingNotFound):
        return HTTPException(status_code=404, detail=ERROR_LISTING_NOT_FOUND)
    logger.error("Catalog request failed: %s", e)
    return HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)


@router.get("/listings")
async def browse_listings(
    q: str = Query("", description="Search in name and description"),
    category: Optional[str] = None,
    min_cost: Optional[Decimal] = Query(None, ge=0),
    max_cost: Optional[Decimal] = Query(None, ge=0),
    sort: str = Query("default"),
    bridge: CartCatalogBridge = Depends(get_bridge),
):
    """Active listings with stats and categories."""
    if sort not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {', '.join(SORT_OPTIONS)}")

    filters = BrowseFilters(query=q, category=category or None, min_cost=min_cost, max_cost=max_cost, sort=sort)
    try:
        result = await bridge.browse(filters)
    except (CatalogUnavailable, ListingNotFound) as e:
        raise _catalog_http_error(e)

    logger.debug("Browse q=%s returned %d listings", sanitize_string_for_logging(q), len(result.listings))
    return {
        "listings": [view.to_dict() for view in result.listings],
        "stats": {
            "total": result.total,
            "active": result.active,
            "expired": result.expired,
        },
        "categories": result.categories,
    }


@router.get("/listings/{listing_id}")
async def get_listing(listing_id: int, bridge: CartCatalogBridge = Depends(get_bridge)):
    """Listing detail with related listings from the same category."""
    try:
        result = await bridge.detail(listing_id)
    except (CatalogUnavailable, ListingNotFound) as e:
        raise _catalog_http_error(e)

    return {
        "listing": result.listing.to_dict(),
        "related": [view.to_dict() for view in result.related],
    }


@router.get("/listings/{listing_id}/image")
async def get_listing_image(listing_id: int, client: CatalogClient = Depends(get_catalog_client)):
    try:
        content, content_type = await client.fetch_image(listing_id)
    except CatalogUnavailable as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=ERROR_LISTING_NOT_FOUND)
        raise _catalog_http_error(e)
    return Response(content=content, media_type=content_type)


@router.post("/listings")
async def add_listing(
    category: str = Form(...),
    name: str = Form(...),
    description: str = Form(""),
    cost: Decimal = Form(...),
    sid: int = Form(...),
    timer: int = Form(...),
    productimage: UploadFile = File(...),
    client: CatalogClient = Depends(get_catalog_client),
):
    """Donor submits a listing with an image and a time-to-live in minutes."""
    new_listing = NewListing(
        category=category,
        name=name,
        description=description,
        cost=cost,
        seller_id=sid,
        timer=timer,
        image=await productimage.read(),
        image_filename=productimage.filename or "image.jpg",
        image_content_type=productimage.content_type or "image/jpeg",
    )
    try:
        message = await create_listing(client, new_listing)
    except ListingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CatalogUnavailable as e:
        raise _catalog_http_error(e)

    return {"success": True, "message": message, "expires_in_seconds": timer * 60}


@router.get("/donors/{seller_id}/summary")
async def get_donor_summary(
    seller_id: int,
    client: CatalogClient = Depends(get_catalog_client),
    clock: Clock = Depends(get_clock),
):
    """Counts shown on the donor dashboard."""
    try:
        summary = await donor_summary(client, seller_id, clock)
    except CatalogUnavailable as e:
        raise _catalog_http_error(e)

    logger.debug("Donor summary for %s", sanitize_id_for_logging(seller_id))
    return {
        "total": summary.total,
        "with_timer": summary.with_timer,
        "active": summary.active,
        "expired": summary.expired,
    }

"""
Admin Sellers Router

Donor account review: list, approve, reject, delete.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from foodshare.auth import verify_admin
from foodshare.catalog import CatalogClient
from foodshare.errors import ERROR_CATALOG_UNAVAILABLE, ERROR_SELLER_NOT_FOUND, CatalogUnavailable
from foodshare.logging import get_logger, sanitize_id_for_logging
from ..deps import get_catalog_client

logger = get_logger(__name__)

router = APIRouter(tags=["admin-sellers"])


def _account_error(e: CatalogUnavailable) -> HTTPException:
    if e.status_code == 404:
        return HTTPException(status_code=404, detail=ERROR_SELLER_NOT_FOUND)
    return HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)


@router.get("/sellers")
async def admin_get_sellers(
    status: Optional[str] = None,
    client: CatalogClient = Depends(get_catalog_client),
    admin=Depends(verify_admin),
):
    """All sellers, optionally only those with the given status"""
    try:
        sellers = await client.fetch_sellers()
    except CatalogUnavailable as e:
        raise _account_error(e)

    if status:
        if status.lower() == "pending":
            sellers = [s for s in sellers if s.is_pending]
        else:
            sellers = [s for s in sellers if (s.status or "").lower() == status.lower()]
    return [s.model_dump() for s in sellers]


@router.put("/sellers/{seller_id}/approve")
async def admin_approve_seller(
    seller_id: int,
    client: CatalogClient = Depends(get_catalog_client),
    admin=Depends(verify_admin),
):
    try:
        message = await client.approve_seller(seller_id)
    except CatalogUnavailable as e:
        raise _account_error(e)

    logger.info("Seller %s approved", sanitize_id_for_logging(seller_id))
    return {"success": True, "message": message}


@router.put("/sellers/{seller_id}/reject")
async def admin_reject_seller(
    seller_id: int,
    client: CatalogClient = Depends(get_catalog_client),
    admin=Depends(verify_admin),
):
    try:
        message = await client.reject_seller(seller_id)
    except CatalogUnavailable as e:
        raise _account_error(e)

    logger.info("Seller %s rejected", sanitize_id_for_logging(seller_id))
    return {"success": True, "message": message}


@router.delete("/sellers/{seller_id}")
async def admin_delete_seller(
    seller_id: int,
    client: CatalogClient = Depends(get_catalog_client),
    admin=Depends(verify_admin),
):
    try:
        message = await client.delete_seller(seller_id)
    except CatalogUnavailable as e:
        raise _account_error(e)

    logger.info("Seller %s deleted", sanitize_id_for_logging(seller_id))
    return {"success": True, "message": message}

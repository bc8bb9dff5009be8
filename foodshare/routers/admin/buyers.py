"""
Admin Buyers Router
"""
from fastapi import APIRouter, Depends, HTTPException

from foodshare.auth import verify_admin
from foodshare.catalog import CatalogClient
from foodshare.errors import ERROR_BUYER_NOT_FOUND, ERROR_CATALOG_UNAVAILABLE, CatalogUnavailable
from foodshare.logging import get_logger, sanitize_id_for_logging
from ..deps import get_catalog_client

logger = get_logger(__name__)

router = APIRouter(tags=["admin-buyers"])


@router.get("/buyers")
async def admin_get_buyers(client: CatalogClient = Depends(get_catalog_client), admin=Depends(verify_admin)):
    """Get all buyers"""
    try:
        buyers = await client.fetch_buyers()
    except CatalogUnavailable:
        raise HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)
    return [b.model_dump() for b in buyers]


@router.delete("/buyers/{buyer_id}")
async def admin_delete_buyer(
    buyer_id: int,
    client: CatalogClient = Depends(get_catalog_client),
    admin=Depends(verify_admin),
):
    try:
        message = await client.delete_buyer(buyer_id)
    except CatalogUnavailable as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=ERROR_BUYER_NOT_FOUND)
        raise HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)

    logger.info("Buyer %s deleted", sanitize_id_for_logging(buyer_id))
    return {"success": True, "message": message}

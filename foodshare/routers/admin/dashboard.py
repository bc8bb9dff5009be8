"""
Admin Dashboard Router

Account counts for the admin home screen.
"""
import asyncio

from fastapi import APIRouter, Depends, HTTPException

from foodshare.auth import verify_admin
from foodshare.catalog import CatalogClient
from foodshare.errors import ERROR_CATALOG_UNAVAILABLE, CatalogUnavailable
from ..deps import get_catalog_client

router = APIRouter(tags=["admin-dashboard"])


@router.get("/dashboard")
async def admin_dashboard(client: CatalogClient = Depends(get_catalog_client), admin=Depends(verify_admin)):
    try:
        sellers, buyers = await asyncio.gather(client.fetch_sellers(), client.fetch_buyers())
    except CatalogUnavailable:
        raise HTTPException(status_code=502, detail=ERROR_CATALOG_UNAVAILABLE)

    return {
        "sellers": len(sellers),
        "buyers": len(buyers),
        "pending_sellers": sum(1 for s in sellers if s.is_pending),
    }

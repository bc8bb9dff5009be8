"""
Admin API Router

Admin-only endpoints for reviewing donor (seller) and recipient (buyer)
accounts. Combines all sub-routers into a single router with tag "admin".
"""
from fastapi import APIRouter

from .buyers import router as buyers_router
from .dashboard import router as dashboard_router
from .sellers import router as sellers_router

router = APIRouter(tags=["admin"])

router.include_router(dashboard_router)
router.include_router(sellers_router)
router.include_router(buyers_router)

__all__ = ["router"]

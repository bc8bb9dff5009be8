"""API routers.

Combines the public, basket and admin routers under /api.
"""

from fastapi import APIRouter

from .admin import router as admin_router
from .cart import router as cart_router
from .collection import router as collection_router
from .listings import router as listings_router

router = APIRouter(prefix="/api")

router.include_router(listings_router)
router.include_router(cart_router)
router.include_router(collection_router)
router.include_router(admin_router, prefix="/admin")

__all__ = ["router"]

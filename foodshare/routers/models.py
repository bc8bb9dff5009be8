"""
API Pydantic Models

Request bodies shared by the basket endpoints.
"""
from pydantic import BaseModel


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    listing_id: int
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    listing_id: int
    quantity: int = 1  # clamped into [1, 10]


# ==================== COLLECTION MODELS ====================

class AddToCollectionRequest(BaseModel):
    listing_id: int

"""Catalog models - Pydantic models for records served by the catalog API."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from foodshare.money import to_decimal as _to_decimal


class Listing(BaseModel):
    """Donor-submitted food item."""
    id: int
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    cost: Decimal = Decimal("0")  # also used as weight/quantity
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    timer: Optional[int] = None  # minutes to live
    seller_id: Optional[int] = Field(None, alias="sid")

    class Config:
        extra = "ignore"
        populate_by_name = True

    @field_validator("cost", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v):
        # Jackson without JavaTimeModule config emits [y, m, d, h, min, s, nanos]
        if isinstance(v, (list, tuple)):
            parts = list(v) + [0] * (6 - len(v))
            year, month, day, hour, minute, second = parts[:6]
            micro = int(parts[6]) // 1000 if len(parts) > 6 else 0
            return datetime(year, month, day, hour, minute, second, micro)
        if v == "":
            return None
        return v

    @field_validator("timer", mode="before")
    @classmethod
    def parse_timer(cls, v):
        if v in ("", None):
            return None
        return v


class ListingView(BaseModel):
    """Listing annotated with its expiry state at one instant."""
    listing: Listing
    expired: bool
    expires_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = self.listing.model_dump(mode="json")
        data["cost"] = float(self.listing.cost)
        data["expired"] = self.expired
        data["expires_at"] = self.expires_at.isoformat() if self.expires_at else None
        return data


class NewListing(BaseModel):
    """Listing submitted by a donor, forwarded as multipart to the catalog API."""
    category: str
    name: str
    description: str = ""
    cost: Decimal
    seller_id: int
    timer: int
    image: bytes
    image_filename: str = "image.jpg"
    image_content_type: str = "image/jpeg"


class Seller(BaseModel):
    """Donor account."""
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    mobileno: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None  # pending, approved, rejected

    class Config:
        extra = "ignore"

    @property
    def is_pending(self) -> bool:
        return (self.status or "").lower() in ("", "pending")


class Buyer(BaseModel):
    """Recipient account."""
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    mobileno: Optional[str] = None
    address: Optional[str] = None

    class Config:
        extra = "ignore"

"""
Catalog API Client

Async HTTP client for the remote catalog/account API that owns listings,
donor (seller) and recipient (buyer) accounts.
"""
import os
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from foodshare.errors import CatalogUnavailable, ListingNotFound
from foodshare.logging import get_logger, sanitize_id_for_logging
from .models import Buyer, Listing, NewListing, Seller

logger = get_logger(__name__)

CATALOG_API_URL = os.environ.get("CATALOG_API_URL", "http://localhost:2030")
CATALOG_API_TIMEOUT = float(os.environ.get("CATALOG_API_TIMEOUT", "10"))


class CatalogClient:
    """Thin wrapper over the catalog API endpoints."""

    def __init__(
        self,
        base_url: str = CATALOG_API_URL,
        timeout: float = CATALOG_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazily create the shared httpx client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = await self._get_http_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Catalog %s %s failed: %s", method, path, type(e).__name__)
            raise CatalogUnavailable(f"Catalog request failed: {type(e).__name__}") from e

        if response.status_code >= 400:
            logger.warning("Catalog %s %s returned %s", method, path, response.status_code)
            raise CatalogUnavailable(
                f"Catalog returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json_list(response: httpx.Response) -> list[dict[str, Any]]:
        try:
            data = response.json()
        except ValueError as e:
            raise CatalogUnavailable("Catalog returned invalid JSON") from e
        if not isinstance(data, list):
            raise CatalogUnavailable("Catalog returned unexpected payload")
        return data

    @staticmethod
    def _parse_many(model, records: list[dict[str, Any]]) -> list:
        """Validate records, skipping malformed ones."""
        parsed = []
        for record in records:
            try:
                parsed.append(model.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping malformed %s record: %s", model.__name__, e.error_count())
        return parsed

    # ==================== LISTINGS ====================

    async def fetch_listings(self) -> list[Listing]:
        """All listings, expired ones included."""
        response = await self._request("GET", "/product/viewallproducts")
        return self._parse_many(Listing, self._json_list(response))

    async def fetch_listing(self, listing_id: int) -> Listing:
        try:
            response = await self._request("GET", f"/product/getproduct/{listing_id}")
        except CatalogUnavailable as e:
            if e.status_code == 404:
                raise ListingNotFound(listing_id) from e
            raise

        # Some backends answer 200 with an empty body or null for unknown ids
        if not response.content:
            raise ListingNotFound(listing_id)
        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogUnavailable("Catalog returned an invalid listing") from e
        if payload is None:
            raise ListingNotFound(listing_id)
        try:
            return Listing.model_validate(payload)
        except ValueError as e:
            raise CatalogUnavailable("Catalog returned an invalid listing") from e

    async def fetch_listings_by_seller(self, seller_id: int) -> list[Listing]:
        response = await self._request("GET", f"/product/viewproductsbyseller/{seller_id}")
        return self._parse_many(Listing, self._json_list(response))

    async def fetch_image(self, listing_id: int) -> tuple[bytes, str]:
        """Listing image bytes and content type."""
        response = await self._request("GET", "/product/displayproductimage", params={"id": listing_id})
        return response.content, response.headers.get("content-type", "image/jpeg")

    async def create_listing(self, new_listing: NewListing) -> str:
        """Submit a listing as multipart form data. Returns the server's message."""
        data = {
            "category": new_listing.category,
            "name": new_listing.name,
            "description": new_listing.description,
            "cost": str(new_listing.cost),
            "sid": str(new_listing.seller_id),
            "timer": str(new_listing.timer),
        }
        files = {
            "productimage": (
                new_listing.image_filename,
                new_listing.image,
                new_listing.image_content_type,
            ),
        }
        response = await self._request("POST", "/product/addproduct", data=data, files=files)
        logger.info("Created listing for seller %s", sanitize_id_for_logging(new_listing.seller_id))
        return response.text

    # ==================== ACCOUNTS ====================

    async def fetch_sellers(self) -> list[Seller]:
        response = await self._request("GET", "/admin/viewallsellers")
        return self._parse_many(Seller, self._json_list(response))

    async def fetch_buyers(self) -> list[Buyer]:
        response = await self._request("GET", "/admin/viewallbuyers")
        return self._parse_many(Buyer, self._json_list(response))

    async def approve_seller(self, seller_id: int) -> str:
        response = await self._request("PUT", f"/seller/approve/{seller_id}")
        return response.text

    async def reject_seller(self, seller_id: int) -> str:
        response = await self._request("PUT", f"/seller/reject/{seller_id}")
        return response.text

    async def delete_seller(self, seller_id: int) -> str:
        response = await self._request("DELETE", "/seller/delete", params={"id": seller_id})
        return response.text

    async def delete_buyer(self, buyer_id: int) -> str:
        response = await self._request("DELETE", "/admin/deletebuyer", params={"bid": buyer_id})
        return response.text

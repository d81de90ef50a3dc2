"""Seller Service - Mirror sellers from the business API

The business API is the source of truth for sellers. Sync upserts on the
business-side ID, so repeated or overlapping runs converge instead of
duplicating. Failed calls are not retried.
"""
from typing import Any, Dict, List, Optional

import httpx

from ..config.settings import settings
from ..domain.models import Seller
from ..domain.errors import BusinessApiError, SellerNotFoundError
from ..repositories.seller_repo import SellerRepository
from ..utils.idgen import generate_seller_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _upstream_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return response.text or response.reason_phrase


class BusinessApiClient:
    """Thin async client for the business API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.business_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.business_api_timeout_seconds
        self._transport = transport

    async def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Business API call failed: {e}")
            raise BusinessApiError(
                f"Business API unreachable: {e}",
                details={"url": url}
            )

        if response.status_code >= 400:
            message = _upstream_message(response)
            logger.error(f"Business API error: {response.status_code} - {message}")
            raise BusinessApiError(
                message,
                details={"url": url, "status_code": response.status_code}
            )

        try:
            return response.json()
        except ValueError:
            raise BusinessApiError("Business API returned invalid JSON", details={"url": url})

    async def fetch_sellers(self) -> List[Dict[str, Any]]:
        """All sellers known to the business side"""
        data = await self._get("/sellers")
        if isinstance(data, dict):
            data = data.get("data", [])
        if not isinstance(data, list):
            raise BusinessApiError("Business API returned an unexpected seller list")
        return data

    async def fetch_seller(self, business_seller_id: int) -> Optional[Dict[str, Any]]:
        """One seller by business-side ID"""
        data = await self._get(f"/sellers/{business_seller_id}")
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        return data or None


class SellerService:
    """Service for locally mirrored sellers"""

    def __init__(
        self,
        repo: Optional[SellerRepository] = None,
        client: Optional[BusinessApiClient] = None
    ):
        self.repo = repo or SellerRepository()
        self.client = client or BusinessApiClient()

    async def sync_sellers(self) -> Dict[str, int]:
        """
        Pull every seller from the business API and upsert locally

        Returns:
            {"new_count", "updated_count", "total_fetched"}
        """
        logger.info("Seller sync started")
        business_sellers = await self.client.fetch_sellers()

        new_count = 0
        updated_count = 0
        synced_at = utc_now()
        for entry in business_sellers:
            business_id = entry.get("id")
            if business_id is None:
                logger.warning(f"Skipping business seller without id: {entry}")
                continue
            inserted = self.repo.upsert_by_business_id(
                business_seller_id=int(business_id),
                name=entry.get("name") or "",
                email=entry.get("email"),
                synced_at=synced_at
            )
            if inserted:
                new_count += 1
            else:
                updated_count += 1

        summary = {
            "new_count": new_count,
            "updated_count": updated_count,
            "total_fetched": len(business_sellers),
        }
        logger.info(
            f"Seller sync completed. New: {new_count}, Updated: {updated_count}, "
            f"Total: {len(business_sellers)}"
        )
        return summary

    def list_sellers(self) -> List[Seller]:
        return self.repo.list_sellers()

    def get_seller(self, seller_id: str) -> Seller:
        """Get seller by local ID or raise"""
        seller = self.repo.get_seller(seller_id)
        if seller is None:
            raise SellerNotFoundError(f"Seller {seller_id} not found")
        return seller

    async def ensure_seller_exists(self, business_seller_id: int) -> Seller:
        """Local seller for a business ID, fetched and created on first sight"""
        seller = self.repo.get_by_business_id(business_seller_id)
        if seller is not None:
            return seller

        logger.info(f"Seller {business_seller_id} not found locally, fetching from business API")
        entry = await self.client.fetch_seller(business_seller_id)
        if not entry or entry.get("id") is None:
            raise SellerNotFoundError(
                "Seller not found on business side",
                details={"business_seller_id": business_seller_id}
            )

        now = utc_now()
        seller = Seller(
            seller_id=generate_seller_id(),
            business_seller_id=int(entry["id"]),
            name=entry.get("name") or "",
            email=entry.get("email"),
            last_synced_at=now,
            created_at=now
        )
        return self.repo.create_seller(seller)

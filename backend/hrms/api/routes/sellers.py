"""Seller API Routes - Business API mirror"""
from fastapi import APIRouter, Depends

from ..deps import get_seller_service
from ..responses import ok
from ...services.seller_service import SellerService

router = APIRouter()


@router.post("/sync")
async def sync_sellers(service: SellerService = Depends(get_seller_service)):
    """Pull sellers from the business API now"""
    summary = await service.sync_sellers()
    return ok(message="Sellers synced successfully", summary=summary)


@router.get("")
async def list_sellers(service: SellerService = Depends(get_seller_service)):
    """Locally mirrored sellers"""
    sellers = service.list_sellers()
    return ok(sellers, count=len(sellers))


@router.get("/{seller_id}")
async def get_seller(seller_id: str, service: SellerService = Depends(get_seller_service)):
    """One seller by local ID"""
    return ok(service.get_seller(seller_id))

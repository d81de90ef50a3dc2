"""Seller Repository - Local mirror of business-side sellers"""
from datetime import datetime
from typing import List, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING

from .mongo_client import get_collection
from ..domain.models import Seller
from ..utils.idgen import generate_seller_id
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SellerRepository:
    """Repository for sellers keyed by their business API identifier"""
    
    COLLECTION_NAME = "sellers"
    
    def __init__(self):
        self._sellers: Collection = get_collection(self.COLLECTION_NAME)
    
    def upsert_by_business_id(
        self,
        business_seller_id: int,
        name: str,
        email: Optional[str],
        synced_at: datetime
    ) -> bool:
        """
        Insert or refresh a seller by external ID.
        
        Returns:
            True if a new seller was inserted, False if an existing one was updated
        """
        seller_id = generate_seller_id()
        result = self._sellers.update_one(
            {"business_seller_id": business_seller_id},
            {
                "$set": {
                    "name": name,
                    "email": email,
                    "last_synced_at": synced_at,
                },
                "$setOnInsert": {
                    "_id": seller_id,
                    "seller_id": seller_id,
                    "created_at": synced_at,
                },
            },
            upsert=True
        )
        return result.upserted_id is not None
    
    def create_seller(self, seller: Seller) -> Seller:
        """Create a seller"""
        doc = seller.model_dump()
        doc["_id"] = seller.seller_id
        self._sellers.insert_one(doc)
        logger.info(
            f"Seller {seller.business_seller_id} created locally",
            extra={"seller_id": seller.seller_id}
        )
        return seller
    
    def get_seller(self, seller_id: str) -> Optional[Seller]:
        """Get seller by local ID"""
        doc = self._sellers.find_one({"seller_id": seller_id})
        if doc:
            doc.pop("_id", None)
            return Seller.model_validate(doc)
        return None
    
    def get_by_business_id(self, business_seller_id: int) -> Optional[Seller]:
        """Get seller by business API ID"""
        doc = self._sellers.find_one({"business_seller_id": business_seller_id})
        if doc:
            doc.pop("_id", None)
            return Seller.model_validate(doc)
        return None
    
    def list_sellers(self) -> List[Seller]:
        """All sellers, newest first"""
        sellers = []
        for doc in self._sellers.find().sort("created_at", DESCENDING):
            doc.pop("_id", None)
            sellers.append(Seller.model_validate(doc))
        return sellers

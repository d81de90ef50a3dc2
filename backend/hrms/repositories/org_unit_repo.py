"""Org Unit Repository - Organizational hierarchy nodes"""
from typing import List, Optional
from pymongo.collection import Collection
from pymongo import ASCENDING

from .mongo_client import get_collection
from ..domain.models import OrgUnit
from ..utils.logger import get_logger

logger = get_logger(__name__)


class OrgUnitRepository:
    """Repository for org units stored as parent pointers"""
    
    COLLECTION_NAME = "org_units"
    
    def __init__(self):
        self._units: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_org_unit(self, unit: OrgUnit) -> OrgUnit:
        """Create an org unit"""
        doc = unit.model_dump()
        doc["_id"] = unit.org_unit_id
        self._units.insert_one(doc)
        logger.info(f"Created org unit: {unit.name}", extra={"org_unit_id": unit.org_unit_id})
        return unit
    
    def get_org_unit(self, org_unit_id: str) -> Optional[OrgUnit]:
        """Get org unit by ID"""
        doc = self._units.find_one({"org_unit_id": org_unit_id})
        if doc:
            doc.pop("_id", None)
            return OrgUnit.model_validate(doc)
        return None
    
    def list_org_units(self, department_code: Optional[str] = None) -> List[OrgUnit]:
        """All org units in storage order (level, then name)"""
        query = {"department_code": department_code} if department_code else {}
        units = []
        for doc in self._units.find(query).sort([("level", ASCENDING), ("name", ASCENDING)]):
            doc.pop("_id", None)
            units.append(OrgUnit.model_validate(doc))
        return units
    
    def count_children(self, org_unit_id: str) -> int:
        """Number of units whose parent is the given unit"""
        return self._units.count_documents({"parent_id": org_unit_id})
    
    def delete_org_unit(self, org_unit_id: str) -> bool:
        """Delete an org unit. Returns True if deleted."""
        result = self._units.delete_one({"org_unit_id": org_unit_id})
        return result.deleted_count > 0

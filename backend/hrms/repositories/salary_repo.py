"""Salary Breakup Repository - One breakup file per employee per pay period"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from .mongo_client import get_collection
from ..domain.models import BreakupFile
from ..domain.errors import DuplicateBreakupError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SalaryBreakupRepository:
    """Repository for salary breakup files"""
    
    COLLECTION_NAME = "salary_breakups"
    
    def __init__(self):
        self._breakups: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_breakup(self, breakup: BreakupFile) -> BreakupFile:
        """Persist a breakup file; the (employee, month, year) index is unique"""
        doc = breakup.model_dump()
        doc["_id"] = breakup.breakup_id
        try:
            self._breakups.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateBreakupError(
                f"Salary for {breakup.month} {breakup.year} already exists for this employee",
                details={"employee_id": breakup.employee_id}
            )
        logger.info(
            f"Created breakup file for {breakup.month} {breakup.year}",
            extra={"breakup_id": breakup.breakup_id, "employee_id": breakup.employee_id}
        )
        return breakup
    
    def get_breakup(self, breakup_id: str) -> Optional[BreakupFile]:
        """Get breakup file by ID"""
        doc = self._breakups.find_one({"breakup_id": breakup_id})
        if doc:
            doc.pop("_id", None)
            return BreakupFile.model_validate(doc)
        return None
    
    def find_for_period(self, employee_id: str, month: str, year: int) -> Optional[BreakupFile]:
        """Breakup file of an employee for a given month and year"""
        doc = self._breakups.find_one({"employee_id": employee_id, "month": month, "year": year})
        if doc:
            doc.pop("_id", None)
            return BreakupFile.model_validate(doc)
        return None
    
    def get_latest_for_employee(self, employee_id: str) -> Optional[BreakupFile]:
        """Most recently created breakup file of an employee"""
        doc = self._breakups.find_one({"employee_id": employee_id}, sort=[("created_at", DESCENDING)])
        if doc:
            doc.pop("_id", None)
            return BreakupFile.model_validate(doc)
        return None
    
    def list_for_employee(self, employee_id: str) -> List[BreakupFile]:
        """Salary history of an employee, newest first"""
        cursor = self._breakups.find({"employee_id": employee_id}).sort("created_at", DESCENDING)
        breakups = []
        for doc in cursor:
            doc.pop("_id", None)
            breakups.append(BreakupFile.model_validate(doc))
        return breakups
    
    def list_breakups(
        self,
        month: Optional[str] = None,
        year: Optional[int] = None,
        paid: Optional[bool] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[BreakupFile]:
        """List breakup files with optional period and payment filters"""
        query: Dict[str, Any] = {}
        if month:
            query["month"] = month
        if year is not None:
            query["year"] = year
        if paid is True:
            query["paid_at"] = {"$ne": None}
        elif paid is False:
            query["paid_at"] = None
        
        cursor = self._breakups.find(query).sort("created_at", DESCENDING).skip(skip).limit(limit)
        breakups = []
        for doc in cursor:
            doc.pop("_id", None)
            breakups.append(BreakupFile.model_validate(doc))
        return breakups
    
    def mark_paid(
        self,
        breakup_id: str,
        paid_at: datetime,
        paid_month: str,
        paid_year: int,
        paid_time: str
    ) -> Optional[BreakupFile]:
        """Record payment on an unpaid breakup file"""
        doc = self._breakups.find_one_and_update(
            {"breakup_id": breakup_id, "paid_at": None},
            {"$set": {
                "paid_at": paid_at,
                "paid_month": paid_month,
                "paid_year": paid_year,
                "paid_time": paid_time
            }},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            return None
        doc.pop("_id", None)
        return BreakupFile.model_validate(doc)

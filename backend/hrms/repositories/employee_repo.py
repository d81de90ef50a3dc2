"""Employee Repository - Data access for the employee directory"""
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from .mongo_client import get_collection
from ..domain.models import Employee
from ..domain.errors import AlreadyExistsError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class EmployeeRepository:
    """Repository for finalized employee records"""
    
    COLLECTION_NAME = "employees"
    
    def __init__(self):
        self._employees: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_employee(self, employee: Employee) -> Employee:
        """Create an employee"""
        doc = employee.model_dump()
        doc["_id"] = employee.employee_id
        try:
            self._employees.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExistsError(f"Employee {employee.employee_id} already exists")
        logger.info(f"Created employee: {employee.name}", extra={"employee_id": employee.employee_id})
        return employee
    
    def get_employee(self, employee_id: str) -> Optional[Employee]:
        """Get employee by ID"""
        doc = self._employees.find_one({"employee_id": employee_id})
        if doc:
            doc.pop("_id", None)
            return Employee.model_validate(doc)
        return None
    
    def get_employees_by_ids(self, employee_ids: List[str]) -> List[Employee]:
        """Get every employee whose ID is in the list (missing IDs are skipped)"""
        if not employee_ids:
            return []
        cursor = self._employees.find({"employee_id": {"$in": list(employee_ids)}})
        employees = []
        for doc in cursor:
            doc.pop("_id", None)
            employees.append(Employee.model_validate(doc))
        return employees
    
    def list_employees(
        self,
        department_code: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Employee]:
        """List employees, optionally filtered by department"""
        query: Dict[str, Any] = {}
        if department_code:
            query["department_code"] = department_code
        
        cursor = self._employees.find(query).sort("name", ASCENDING).skip(skip).limit(limit)
        employees = []
        for doc in cursor:
            doc.pop("_id", None)
            employees.append(Employee.model_validate(doc))
        return employees

"""Role Repository - Role definitions and role assignments"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from .mongo_client import get_collection
from ..domain.models import Role, RoleAssignment, SalaryRules
from ..domain.errors import AlreadyExistsError, ValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RoleRepository:
    """Repository for role definitions"""
    
    COLLECTION_NAME = "roles"
    
    def __init__(self):
        self._roles: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_role(self, role: Role) -> Role:
        """Create a role; names are unique"""
        doc = role.model_dump()
        doc["_id"] = role.role_id
        try:
            self._roles.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExistsError(f"Role '{role.name}' already exists")
        logger.info(f"Created role: {role.name}")
        return role
    
    def get_role(self, role_id: str) -> Optional[Role]:
        """Get role by ID"""
        doc = self._roles.find_one({"role_id": role_id})
        if doc:
            doc.pop("_id", None)
            return Role.model_validate(doc)
        return None
    
    def get_role_by_name(self, name: str) -> Optional[Role]:
        """Get role by its unique name"""
        doc = self._roles.find_one({"name": name})
        if doc:
            doc.pop("_id", None)
            return Role.model_validate(doc)
        return None
    
    def list_roles(self) -> List[Role]:
        """List all roles ordered by name"""
        roles = []
        for doc in self._roles.find().sort("name", ASCENDING):
            doc.pop("_id", None)
            roles.append(Role.model_validate(doc))
        return roles
    
    def find_role_ids(self, identifiers: List[str]) -> List[str]:
        """Map a mix of role IDs and role names to role IDs"""
        if not identifiers:
            return []
        cursor = self._roles.find(
            {"$or": [{"role_id": {"$in": identifiers}}, {"name": {"$in": identifiers}}]},
            {"role_id": 1}
        )
        return [doc["role_id"] for doc in cursor]
    
    def update_salary_rules(self, role_id: str, salary_rules: SalaryRules) -> Optional[Role]:
        """Replace the salary rules of a role"""
        doc = self._roles.find_one_and_update(
            {"role_id": role_id},
            {"$set": {"salary_rules": salary_rules.model_dump()}},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            return None
        doc.pop("_id", None)
        return Role.model_validate(doc)
    
    def delete_role(self, role_id: str) -> bool:
        """Delete a role. Returns True if deleted."""
        result = self._roles.delete_one({"role_id": role_id})
        return result.deleted_count > 0


class RoleAssignmentRepository:
    """Repository for employee role assignments (historical, never deleted)"""
    
    COLLECTION_NAME = "role_assignments"
    
    def __init__(self):
        self._assignments: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_assignment(self, assignment: RoleAssignment) -> RoleAssignment:
        """Create a role assignment"""
        doc = assignment.model_dump()
        doc["_id"] = assignment.assignment_id
        try:
            self._assignments.insert_one(doc)
        except DuplicateKeyError:
            # Partial unique index on (employee_id, is_active=True)
            raise ValidationError(
                "Employee already has an active role assignment. End it before assigning a new role.",
                details={"employee_id": assignment.employee_id}
            )
        logger.info(
            f"Assigned role {assignment.role_id}",
            extra={"employee_id": assignment.employee_id}
        )
        return assignment
    
    def get_assignment(self, assignment_id: str) -> Optional[RoleAssignment]:
        """Get assignment by ID"""
        doc = self._assignments.find_one({"assignment_id": assignment_id})
        if doc:
            doc.pop("_id", None)
            return RoleAssignment.model_validate(doc)
        return None
    
    def list_for_employee(self, employee_id: str) -> List[RoleAssignment]:
        """All assignments of an employee, newest first"""
        cursor = self._assignments.find({"employee_id": employee_id}).sort("assigned_at", DESCENDING)
        assignments = []
        for doc in cursor:
            doc.pop("_id", None)
            assignments.append(RoleAssignment.model_validate(doc))
        return assignments
    
    def end_assignment(self, assignment_id: str, ended_at: datetime) -> Optional[RoleAssignment]:
        """Deactivate an assignment and close its validity window"""
        doc = self._assignments.find_one_and_update(
            {"assignment_id": assignment_id},
            {"$set": {"is_active": False, "effective_until": ended_at}},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            return None
        doc.pop("_id", None)
        return RoleAssignment.model_validate(doc)
    
    def find_current_assignments(
        self,
        now: datetime,
        role_ids: Optional[List[str]] = None,
        department_code: Optional[str] = None,
        status: Optional[str] = None,
        org_unit_id: Optional[str] = None,
        employee_id: Optional[str] = None
    ) -> List[RoleAssignment]:
        """
        Find assignments that are valid at `now`.
        
        Valid means active, started, and either open-ended or not yet lapsed.
        """
        query: Dict[str, Any] = {
            "is_active": True,
            "effective_from": {"$lte": now},
            "$or": [
                {"effective_until": None},
                {"effective_until": {"$gte": now}}
            ]
        }
        if role_ids is not None:
            query["role_id"] = {"$in": list(role_ids)}
        if department_code:
            query["department_code"] = department_code
        if status:
            query["status"] = status
        if org_unit_id:
            query["org_unit_id"] = org_unit_id
        if employee_id:
            query["employee_id"] = employee_id
        
        assignments = []
        for doc in self._assignments.find(query):
            doc.pop("_id", None)
            assignments.append(RoleAssignment.model_validate(doc))
        return assignments
    
    def find_active_for_employee(self, employee_id: str) -> Optional[RoleAssignment]:
        """The employee's active assignment, if any"""
        doc = self._assignments.find_one({"employee_id": employee_id, "is_active": True})
        if doc:
            doc.pop("_id", None)
            return RoleAssignment.model_validate(doc)
        return None
    
    def find_active_by_org_units(self, org_unit_ids: List[str]) -> List[RoleAssignment]:
        """Active assignments placed in any of the org units"""
        cursor = self._assignments.find(
            {"org_unit_id": {"$in": list(org_unit_ids)}, "is_active": True}
        ).sort("assigned_at", ASCENDING)
        assignments = []
        for doc in cursor:
            doc.pop("_id", None)
            assignments.append(RoleAssignment.model_validate(doc))
        return assignments
    
    def count_active_for_role(self, role_id: str) -> int:
        """Number of active assignments of a role"""
        return self._assignments.count_documents({"role_id": role_id, "is_active": True})

"""Role Service - Role catalogue, employee directory and role assignments"""
from datetime import datetime
from typing import List, Optional

from ..domain.models import Employee, Role, RoleAssignment, SalaryRules
from ..domain.enums import DepartmentCode, EventType
from ..domain.errors import (
    ValidationError, AlreadyExistsError, EmployeeNotFoundError,
    RoleNotFoundError, RoleAssignmentNotFoundError, OrgUnitNotFoundError
)
from ..events.router import EventRouter
from ..repositories.employee_repo import EmployeeRepository
from ..repositories.org_unit_repo import OrgUnitRepository
from ..repositories.role_repo import RoleRepository, RoleAssignmentRepository
from ..utils.idgen import generate_employee_id, generate_role_id, generate_role_assignment_id
from ..utils.time import utc_now, ensure_utc
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RoleService:
    """Service for role definitions"""

    def __init__(
        self,
        repo: Optional[RoleRepository] = None,
        assignment_repo: Optional[RoleAssignmentRepository] = None
    ):
        self.repo = repo or RoleRepository()
        self.assignment_repo = assignment_repo or RoleAssignmentRepository()

    def list_roles(self) -> List[Role]:
        """All roles by name"""
        return self.repo.list_roles()

    def get_role(self, role_id: str) -> Role:
        """Get role or raise"""
        role = self.repo.get_role(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found")
        return role

    def create_role(
        self,
        name: str,
        department_code: Optional[DepartmentCode] = None,
        description: Optional[str] = None,
        salary_rules: Optional[SalaryRules] = None
    ) -> Role:
        """Create a role; names are unique"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Role name is required")

        if self.repo.get_role_by_name(name) is not None:
            raise AlreadyExistsError(
                "Role with this name already exists",
                details={"name": name}
            )

        role = Role(
            role_id=generate_role_id(),
            name=name,
            description=description,
            department_code=department_code,
            salary_rules=salary_rules,
            created_at=utc_now()
        )
        return self.repo.create_role(role)

    def delete_role(self, role_id: str) -> None:
        """Delete a role that nobody currently holds"""
        self.get_role(role_id)

        active = self.assignment_repo.count_active_for_role(role_id)
        if active > 0:
            raise ValidationError(
                f"Cannot delete role. {active} active assignment(s) exist.",
                details={"role_id": role_id}
            )

        self.repo.delete_role(role_id)
        logger.info(f"Deleted role {role_id}")


class EmployeeService:
    """Service for the employee directory and role assignments"""

    def __init__(
        self,
        repo: Optional[EmployeeRepository] = None,
        role_repo: Optional[RoleRepository] = None,
        assignment_repo: Optional[RoleAssignmentRepository] = None,
        org_unit_repo: Optional[OrgUnitRepository] = None,
        events: Optional[EventRouter] = None
    ):
        self.repo = repo or EmployeeRepository()
        self.role_repo = role_repo or RoleRepository()
        self.assignment_repo = assignment_repo or RoleAssignmentRepository()
        self.org_unit_repo = org_unit_repo or OrgUnitRepository()
        self.events = events

    # =========================================================================
    # Directory
    # =========================================================================

    def list_employees(
        self,
        department_code: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Employee]:
        return self.repo.list_employees(department_code, skip, limit)

    def get_employee(self, employee_id: str) -> Employee:
        """Get employee or raise"""
        employee = self.repo.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")
        return employee

    def create_employee(
        self,
        name: str,
        email: Optional[str] = None,
        department_code: Optional[DepartmentCode] = None
    ) -> Employee:
        """Add a finalized employee to the directory"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Employee name is required")

        employee = Employee(
            employee_id=generate_employee_id(),
            name=name,
            email=email,
            department_code=department_code,
            is_active=True,
            created_at=utc_now()
        )
        employee = self.repo.create_employee(employee)

        if self.events is not None:
            self.events.emit(EventType.HR_EMPLOYEE_ONBOARDED, {
                "employee_id": employee.employee_id,
                "employee_name": employee.name,
                "department_code": employee.department_code,
            })
        return employee

    # =========================================================================
    # Role assignments
    # =========================================================================

    def list_assignments(self, employee_id: str) -> List[RoleAssignment]:
        """Assignment history of an employee, newest first"""
        self.get_employee(employee_id)
        return self.assignment_repo.list_for_employee(employee_id)

    def assign_role(
        self,
        employee_id: str,
        role_id: str,
        department_code: DepartmentCode,
        org_unit_id: Optional[str] = None,
        effective_from: Optional[datetime] = None,
        effective_until: Optional[datetime] = None,
        assigned_by: Optional[str] = None,
        notes: str = ""
    ) -> RoleAssignment:
        """
        Grant a role to an employee

        An employee holds at most one active assignment; the current one has
        to be ended before a new one is granted.
        """
        employee = self.get_employee(employee_id)
        department_code = DepartmentCode(department_code).value

        role = self.role_repo.get_role(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found")

        status = None
        if org_unit_id:
            unit = self.org_unit_repo.get_org_unit(org_unit_id)
            if unit is None:
                raise OrgUnitNotFoundError(f"Org unit {org_unit_id} not found")
            scoped = department_code != DepartmentCode.ALL and unit.department_code != DepartmentCode.ALL
            if scoped and unit.department_code != department_code:
                raise ValidationError(
                    f"Selected position belongs to {unit.department_code} department, not {department_code}"
                )
            status = unit.status

        if self.assignment_repo.find_active_for_employee(employee_id) is not None:
            raise ValidationError(
                "Employee already has an active role assignment. End it before assigning a new role.",
                details={"employee_id": employee_id}
            )

        now = utc_now()
        effective_from = ensure_utc(effective_from) or now
        effective_until = ensure_utc(effective_until)
        if effective_until is not None and effective_until < effective_from:
            raise ValidationError("effective_until must not be before effective_from")

        assignment = RoleAssignment(
            assignment_id=generate_role_assignment_id(),
            employee_id=employee_id,
            role_id=role_id,
            org_unit_id=org_unit_id,
            department_code=department_code,
            status=status,
            assigned_at=now,
            effective_from=effective_from,
            effective_until=effective_until,
            is_active=True,
            assigned_by=assigned_by,
            notes=notes or ""
        )
        assignment = self.assignment_repo.create_assignment(assignment)

        if self.events is not None:
            self.events.emit(EventType.HR_ROLE_ASSIGNED, {
                "employee_id": employee.employee_id,
                "employee_name": employee.name,
                "role_id": role.role_id,
                "role_name": role.name,
                "department_code": assignment.department_code,
            })
        return assignment

    def end_assignment(self, assignment_id: str) -> RoleAssignment:
        """End an assignment; the record is kept for history"""
        existing = self.assignment_repo.get_assignment(assignment_id)
        if existing is None:
            raise RoleAssignmentNotFoundError(f"Role assignment {assignment_id} not found")
        if not existing.is_active:
            raise ValidationError(
                "Role assignment has already ended",
                details={"assignment_id": assignment_id}
            )

        ended = self.assignment_repo.end_assignment(assignment_id, utc_now())
        logger.info(
            f"Ended role assignment {assignment_id}",
            extra={"employee_id": ended.employee_id}
        )
        return ended

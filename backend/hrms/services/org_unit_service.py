"""Org Unit Service - Organizational hierarchy management"""
import re
from typing import Any, Dict, List, Optional

from ..domain.models import OrgUnit
from ..domain.enums import DepartmentCode, HierarchyStatus
from ..domain.errors import ValidationError, OrgUnitNotFoundError, OrgUnitHasChildrenError
from ..engine.org_tree import build_org_tree
from ..repositories.employee_repo import EmployeeRepository
from ..repositories.org_unit_repo import OrgUnitRepository
from ..repositories.role_repo import RoleAssignmentRepository
from ..utils.idgen import generate_org_unit_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


# Hierarchy level name by depth; anything deeper is a desk
LEVEL_STATUSES = [
    HierarchyStatus.OFFICES,
    HierarchyStatus.GROUPS,
    HierarchyStatus.DIVISIONS,
    HierarchyStatus.DEPARTMENTS,
    HierarchyStatus.BRANCHES,
    HierarchyStatus.CELLS,
]


def status_for_level(level: int) -> HierarchyStatus:
    """Hierarchy status derived from depth"""
    if 0 <= level < len(LEVEL_STATUSES):
        return LEVEL_STATUSES[level]
    return HierarchyStatus.DESKS


def slugify(name: str) -> str:
    """'Karachi Office' -> 'karachi-office'"""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _collect_ids(nodes: List[Dict[str, Any]]) -> List[str]:
    ids = []
    pending = list(nodes)
    while pending:
        node = pending.pop(0)
        ids.append(node["org_unit_id"])
        pending.extend(node["children"])
    return ids


class OrgUnitService:
    """Service for org unit operations"""

    def __init__(
        self,
        repo: Optional[OrgUnitRepository] = None,
        assignment_repo: Optional[RoleAssignmentRepository] = None,
        employee_repo: Optional[EmployeeRepository] = None
    ):
        self.repo = repo or OrgUnitRepository()
        self.assignment_repo = assignment_repo or RoleAssignmentRepository()
        self.employee_repo = employee_repo or EmployeeRepository()

    def get_tree(self, department_code: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Hierarchy as nested nodes

        With a department filter, a unit whose parent falls outside the
        department is shown as a root of its own subtree.
        """
        units = [u.model_dump() for u in self.repo.list_org_units(department_code)]
        present = {u["org_unit_id"] for u in units}
        tops = dict.fromkeys(u["parent_id"] or None for u in units if u["parent_id"] not in present)
        tree = []
        for parent_id in tops:
            tree.extend(build_org_tree(units, parent_id=parent_id))
        logger.info(f"Built org tree with {len(tree)} roots from {len(units)} units")
        return tree

    def get_org_unit(self, org_unit_id: str) -> OrgUnit:
        """Get org unit or raise"""
        unit = self.repo.get_org_unit(org_unit_id)
        if unit is None:
            raise OrgUnitNotFoundError(f"Org unit {org_unit_id} not found")
        return unit

    def create_org_unit(
        self,
        name: str,
        department_code: DepartmentCode,
        parent_id: Optional[str] = None,
        description: str = ""
    ) -> OrgUnit:
        """
        Create an org unit under an optional parent

        Level, status and path are derived from the parent, never taken
        from the caller.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Organization unit name is required")

        parent = None
        if parent_id:
            parent = self.repo.get_org_unit(parent_id)
            if parent is None:
                raise OrgUnitNotFoundError(
                    f"Parent org unit {parent_id} not found",
                    details={"parent_id": parent_id}
                )

        level = parent.level + 1 if parent else 0
        slug = slugify(name)
        path = f"{parent.path}.{slug}" if parent and parent.path else slug

        unit = OrgUnit(
            org_unit_id=generate_org_unit_id(),
            name=name,
            parent_id=parent.org_unit_id if parent else None,
            department_code=department_code,
            level=level,
            status=status_for_level(level),
            path=path,
            description=description or "",
            created_at=utc_now()
        )
        return self.repo.create_org_unit(unit)

    def delete_org_unit(self, org_unit_id: str) -> None:
        """Delete a leaf org unit without active assignments"""
        self.get_org_unit(org_unit_id)

        children = self.repo.count_children(org_unit_id)
        if children > 0:
            raise OrgUnitHasChildrenError(
                f"Cannot delete org unit with {children} children. Delete children first.",
                details={"org_unit_id": org_unit_id, "children": children}
            )

        active = self.assignment_repo.find_active_by_org_units([org_unit_id])
        if active:
            raise ValidationError(
                f"Cannot delete org unit. {len(active)} active role assignment(s) exist.",
                details={"org_unit_id": org_unit_id}
            )

        self.repo.delete_org_unit(org_unit_id)
        logger.info("Deleted org unit", extra={"org_unit_id": org_unit_id})

    def get_employees(self, org_unit_id: str) -> List[Dict[str, Any]]:
        """Employees actively assigned to the unit or any unit below it"""
        self.get_org_unit(org_unit_id)

        units = [u.model_dump() for u in self.repo.list_org_units()]
        unit_ids = [org_unit_id] + _collect_ids(build_org_tree(units, parent_id=org_unit_id))

        assignments = self.assignment_repo.find_active_by_org_units(unit_ids)
        employees = {
            e.employee_id: e
            for e in self.employee_repo.get_employees_by_ids([a.employee_id for a in assignments])
        }

        result = []
        for assignment in assignments:
            employee = employees.get(assignment.employee_id)
            if employee is None:
                continue
            result.append({
                "employee_id": employee.employee_id,
                "name": employee.name,
                "email": employee.email,
                "role_id": assignment.role_id,
                "org_unit_id": assignment.org_unit_id,
                "assignment_id": assignment.assignment_id,
                "department_code": assignment.department_code,
                "status": assignment.status,
                "effective_from": assignment.effective_from,
                "assigned_by": assignment.assigned_by,
            })
        return result

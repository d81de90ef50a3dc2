"""Recipient Resolver - Turn a notification rule into a concrete recipient list"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..domain.models import NotificationRule, Recipient
from ..domain.enums import TargetingStrategy
from ..repositories.employee_repo import EmployeeRepository
from ..repositories.role_repo import RoleRepository, RoleAssignmentRepository
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class RecipientResolver:
    """
    Resolve notification recipients against the role-assignment table.

    Strategies:
    - global_roles: holders of any target role, any department
    - department_roles: holders of a target role, narrowed by department
      and hierarchy level when the rule sets them
    - specific_users: the listed employees, no validity-window filtering
    - department_all: every holder of a valid assignment in the department

    Only currently valid assignments count for the role and department
    strategies. Misconfigured rules degrade to zero recipients with a
    warning; they never raise.
    """

    def __init__(
        self,
        employee_repo: Optional[EmployeeRepository] = None,
        assignment_repo: Optional[RoleAssignmentRepository] = None,
        role_repo: Optional[RoleRepository] = None
    ):
        self.employee_repo = employee_repo or EmployeeRepository()
        self.assignment_repo = assignment_repo or RoleAssignmentRepository()
        self.role_repo = role_repo or RoleRepository()

    def resolve(
        self,
        rule: NotificationRule,
        payload: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None
    ) -> List[Recipient]:
        """
        Compute the recipients of a rule

        Args:
            rule: Notification rule carrying the targeting strategy
            payload: Triggering event payload (unused by the current strategies)
            now: Reference time for assignment validity (defaults to now)

        Returns:
            Recipients in resolution order, de-duplicated on employee ID
        """
        now = now or utc_now()
        strategy = rule.strategy

        if strategy == TargetingStrategy.GLOBAL_ROLES:
            return self.for_roles(rule.target_roles, now=now)

        if strategy == TargetingStrategy.DEPARTMENT_ROLES:
            return self.for_roles(
                rule.target_roles,
                department=rule.department_filter,
                status=rule.status_filter,
                now=now
            )

        if strategy == TargetingStrategy.SPECIFIC_USERS:
            if not rule.target_user_ids:
                logger.warning(
                    "specific_users rule has no target users",
                    extra={"rule_id": rule.rule_id, "strategy": strategy}
                )
                return []
            return self.for_employees(rule.target_user_ids)

        if strategy == TargetingStrategy.DEPARTMENT_ALL:
            if not rule.department_filter:
                logger.warning(
                    "department_all rule is missing its department filter",
                    extra={"rule_id": rule.rule_id, "strategy": strategy}
                )
                return []
            return self.for_department(rule.department_filter, now=now)

        logger.warning(
            f"Unknown targeting strategy: {strategy}",
            extra={"rule_id": rule.rule_id, "strategy": strategy}
        )
        return []

    def for_roles(
        self,
        role_identifiers: Iterable[str],
        department: Optional[str] = None,
        status: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> List[Recipient]:
        """Holders of any of the roles (IDs or names) with a valid assignment"""
        identifiers = [r for r in role_identifiers or [] if r]
        if not identifiers:
            return []

        role_ids = self.role_repo.find_role_ids(identifiers)
        if not role_ids:
            logger.debug(f"No roles match {identifiers}")
            return []

        assignments = self.assignment_repo.find_current_assignments(
            now or utc_now(),
            role_ids=role_ids,
            department_code=department,
            status=status
        )
        return self.for_employees(a.employee_id for a in assignments)

    def for_department(self, department: str, now: Optional[datetime] = None) -> List[Recipient]:
        """Everyone holding a valid assignment in the department"""
        assignments = self.assignment_repo.find_current_assignments(
            now or utc_now(),
            department_code=department
        )
        return self.for_employees(a.employee_id for a in assignments)

    def for_employees(self, employee_ids: Iterable[Optional[str]]) -> List[Recipient]:
        """Look employees up directly; unknown IDs are dropped"""
        unique_ids: List[str] = []
        seen = set()
        for employee_id in employee_ids:
            if employee_id and employee_id not in seen:
                seen.add(employee_id)
                unique_ids.append(employee_id)

        if not unique_ids:
            return []

        employees = {e.employee_id: e for e in self.employee_repo.get_employees_by_ids(unique_ids)}

        recipients = []
        for employee_id in unique_ids:
            employee = employees.get(employee_id)
            if employee is None:
                continue
            recipients.append(
                Recipient(employee_id=employee.employee_id, name=employee.name, email=employee.email)
            )
        return recipients

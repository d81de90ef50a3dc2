"""Salary Service - Breakup file creation, payment and role salary rules"""
from datetime import datetime
from typing import List, Optional

from ..domain.models import BreakupFile, Role, SalaryRules
from ..domain.enums import EventType
from ..domain.errors import (
    ValidationError, EmployeeNotFoundError, RoleNotFoundError,
    BreakupFileNotFoundError, SalaryAlreadyPaidError, SalaryAlreadyProcessingError
)
from ..engine.salary_calculator import calculate_breakup
from ..events.router import EventRouter
from ..repositories.employee_repo import EmployeeRepository
from ..repositories.role_repo import RoleRepository
from ..repositories.salary_repo import SalaryBreakupRepository
from ..utils.idgen import generate_breakup_id
from ..utils.time import utc_now, month_name, clock_time
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SalaryService:
    """Service for salary breakups"""

    def __init__(
        self,
        repo: Optional[SalaryBreakupRepository] = None,
        role_repo: Optional[RoleRepository] = None,
        employee_repo: Optional[EmployeeRepository] = None,
        events: Optional[EventRouter] = None
    ):
        self.repo = repo or SalaryBreakupRepository()
        self.role_repo = role_repo or RoleRepository()
        self.employee_repo = employee_repo or EmployeeRepository()
        self.events = events

    # =========================================================================
    # Breakup files
    # =========================================================================

    def create_breakup_file(
        self,
        employee_id: str,
        role_id: str,
        month: str,
        year: int,
        salary_rules: Optional[SalaryRules] = None
    ) -> BreakupFile:
        """
        Compute and persist the breakup of one employee for one pay period

        The role's own salary rules are used unless an edited rule set is
        supplied.

        Raises:
            SalaryAlreadyPaidError: a paid breakup exists for the period
            SalaryAlreadyProcessingError: an unpaid breakup exists for the period
        """
        if not month or not month.strip():
            raise ValidationError("Month is required")
        month = month.strip()

        employee = self.employee_repo.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")

        role = self.role_repo.get_role(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found")

        rules = salary_rules or role.salary_rules
        if rules is None:
            raise ValidationError(
                f"Role '{role.name}' has no salary rules",
                details={"role_id": role_id}
            )

        existing = self.repo.find_for_period(employee_id, month, year)
        if existing is not None:
            details = {"employee_id": employee_id, "month": month, "year": year}
            if existing.paid_at is not None:
                raise SalaryAlreadyPaidError(
                    f"Salary for {month} {year} has already been paid", details=details
                )
            raise SalaryAlreadyProcessingError(
                f"Salary for {month} {year} is already being processed", details=details
            )

        breakup = BreakupFile(
            breakup_id=generate_breakup_id(),
            employee_id=employee_id,
            role_id=role_id,
            month=month,
            year=year,
            salary_rules=rules,
            calculated_breakup=calculate_breakup(rules),
            created_at=utc_now()
        )
        breakup = self.repo.create_breakup(breakup)

        self._emit(EventType.FINANCE_SALARY_PROCESSED, breakup, employee_name=employee.name)
        return breakup

    def get_breakup(self, breakup_id: str) -> BreakupFile:
        """Get breakup file by ID"""
        breakup = self.repo.get_breakup(breakup_id)
        if breakup is None:
            raise BreakupFileNotFoundError(f"Breakup file {breakup_id} not found")
        return breakup

    def get_latest_breakup(self, employee_id: str) -> BreakupFile:
        """Most recent breakup file of an employee"""
        breakup = self.repo.get_latest_for_employee(employee_id)
        if breakup is None:
            raise BreakupFileNotFoundError(
                f"No breakup file found for employee {employee_id}",
                details={"employee_id": employee_id}
            )
        return breakup

    def get_salary_history(self, employee_id: str) -> List[BreakupFile]:
        """All breakup files of an employee, newest first"""
        return self.repo.list_for_employee(employee_id)

    def list_breakups(
        self,
        month: Optional[str] = None,
        year: Optional[int] = None,
        paid: Optional[bool] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[BreakupFile]:
        """List breakup files"""
        return self.repo.list_breakups(month=month, year=year, paid=paid, skip=skip, limit=limit)

    def mark_paid(self, breakup_id: str, paid_at: Optional[datetime] = None) -> BreakupFile:
        """Record payment of a breakup file; a file can only be paid once"""
        breakup = self.get_breakup(breakup_id)
        if breakup.paid_at is not None:
            raise SalaryAlreadyPaidError(
                f"Salary for {breakup.month} {breakup.year} has already been paid",
                details={"breakup_id": breakup_id}
            )

        paid_at = paid_at or utc_now()
        updated = self.repo.mark_paid(
            breakup_id,
            paid_at=paid_at,
            paid_month=month_name(paid_at),
            paid_year=paid_at.year,
            paid_time=clock_time(paid_at)
        )
        if updated is None:
            # Lost a race with a concurrent payment
            raise SalaryAlreadyPaidError(
                f"Salary for {breakup.month} {breakup.year} has already been paid",
                details={"breakup_id": breakup_id}
            )

        logger.info("Salary marked as paid", extra={"breakup_id": breakup_id, "employee_id": updated.employee_id})
        self._emit(EventType.FINANCE_SALARY_PAID, updated)
        return updated

    # =========================================================================
    # Role salary rules
    # =========================================================================

    def get_role_salary_rules(self, role_id: str) -> Role:
        """Role with its salary rules; the role may be given by ID or name"""
        role = self.role_repo.get_role(role_id) or self.role_repo.get_role_by_name(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found")
        return role

    def update_role_salary_rules(self, role_id: str, salary_rules: SalaryRules) -> Role:
        """Replace the salary rules of a role"""
        role = self.role_repo.update_salary_rules(role_id, salary_rules)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found")
        logger.info(f"Updated salary rules of role {role.name}")
        return role

    def _emit(self, event_type: EventType, breakup: BreakupFile, **extra) -> None:
        if self.events is None:
            return
        payload = {
            "breakup_id": breakup.breakup_id,
            "employee_id": breakup.employee_id,
            "role_id": breakup.role_id,
            "month": breakup.month,
            "year": breakup.year,
            "net_salary": breakup.calculated_breakup.net_salary,
        }
        payload.update(extra)
        self.events.emit(event_type, payload)

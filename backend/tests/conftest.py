"""
Pytest Configuration and Fixtures

Shared fixtures: in-memory repositories, a seeding helper and services
wired to them. Nothing here talks to MongoDB or the business API.
"""

from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Optional

import pytest

from hrms.domain.models import Employee, Role, RoleAssignment, SalaryRules
from hrms.engine.recipient_resolver import RecipientResolver
from hrms.events.router import EventRouter
from hrms.services.notification_dispatcher import NotificationDispatcher
from hrms.utils.idgen import generate_role_assignment_id

from .fakes import (
    NOW,
    FakeBreakupRuleRepository, FakeEmployeeRepository, FakeNotificationRepository,
    FakeNotificationRuleRepository, FakeOrgUnitRepository, FakeRoleAssignmentRepository,
    FakeRoleRepository, FakeSalaryBreakupRepository, FakeSellerRepository
)


class Seeder:
    """Writes fixture data straight into the fake repositories"""

    def __init__(self, repos):
        self.repos = repos

    def employee(
        self,
        employee_id: str,
        name: Optional[str] = None,
        department_code: Optional[str] = None,
        email: Optional[str] = None
    ) -> Employee:
        employee = Employee(
            employee_id=employee_id,
            name=name or employee_id,
            email=email,
            department_code=department_code,
            created_at=NOW
        )
        return self.repos.employees.create_employee(employee)

    def role(
        self,
        role_id: str,
        name: Optional[str] = None,
        salary_rules: Optional[SalaryRules] = None
    ) -> Role:
        role = Role(role_id=role_id, name=name or role_id, salary_rules=salary_rules, created_at=NOW)
        return self.repos.roles.create_role(role)

    def assignment(
        self,
        employee_id: str,
        role_id: str,
        department_code: str,
        status: Optional[str] = None,
        org_unit_id: Optional[str] = None,
        effective_from: Optional[datetime] = None,
        effective_until: Optional[datetime] = None,
        is_active: bool = True
    ) -> RoleAssignment:
        assignment = RoleAssignment(
            assignment_id=generate_role_assignment_id(),
            employee_id=employee_id,
            role_id=role_id,
            org_unit_id=org_unit_id,
            department_code=department_code,
            status=status,
            assigned_at=NOW - timedelta(days=30),
            effective_from=effective_from or NOW - timedelta(days=30),
            effective_until=effective_until,
            is_active=is_active
        )
        return self.repos.assignments.create_assignment(assignment)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def repos():
    return SimpleNamespace(
        employees=FakeEmployeeRepository(),
        roles=FakeRoleRepository(),
        assignments=FakeRoleAssignmentRepository(),
        rules=FakeNotificationRuleRepository(),
        notifications=FakeNotificationRepository(),
        salaries=FakeSalaryBreakupRepository(),
        org_units=FakeOrgUnitRepository(),
        sellers=FakeSellerRepository(),
        breakup_rules=FakeBreakupRuleRepository(),
    )


@pytest.fixture
def seed(repos):
    return Seeder(repos)


@pytest.fixture
def resolver(repos):
    return RecipientResolver(
        employee_repo=repos.employees,
        assignment_repo=repos.assignments,
        role_repo=repos.roles
    )


@pytest.fixture
def dispatcher(repos, resolver):
    return NotificationDispatcher(
        rule_repo=repos.rules,
        notification_repo=repos.notifications,
        resolver=resolver
    )


@pytest.fixture
def event_router():
    return EventRouter()

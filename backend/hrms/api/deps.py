"""API Dependencies - Common dependencies for routes

Services are provided through dependencies so tests can swap them with
`app.dependency_overrides`.
"""
from typing import Optional
from fastapi import Depends, Header, Request

from ..events.router import EventRouter
from ..services.breakup_rule_service import BreakupRuleService
from ..services.notification_service import NotificationService
from ..services.org_unit_service import OrgUnitService
from ..services.role_service import RoleService, EmployeeService
from ..services.salary_service import SalaryService
from ..services.seller_service import SellerService


async def get_employee_id_dep(
    x_employee_id: str = Header(..., alias="X-Employee-Id", min_length=1)
) -> str:
    """
    Caller identity for per-employee endpoints

    Authentication happens upstream; the gateway forwards the
    authenticated employee in X-Employee-Id.
    """
    return x_employee_id


def get_event_router(request: Request) -> EventRouter:
    """The application's event router"""
    return request.app.state.event_router


def get_role_service() -> RoleService:
    return RoleService()


def get_employee_service(events: EventRouter = Depends(get_event_router)) -> EmployeeService:
    return EmployeeService(events=events)


def get_org_unit_service() -> OrgUnitService:
    return OrgUnitService()


def get_salary_service(events: EventRouter = Depends(get_event_router)) -> SalaryService:
    return SalaryService(events=events)


def get_seller_service() -> SellerService:
    return SellerService()


def get_breakup_rule_service() -> BreakupRuleService:
    return BreakupRuleService()


def get_notification_service() -> NotificationService:
    return NotificationService()

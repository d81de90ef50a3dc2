"""Service modules - Business logic layer"""
from .role_service import RoleService, EmployeeService
from .org_unit_service import OrgUnitService
from .salary_service import SalaryService
from .seller_service import SellerService, BusinessApiClient
from .breakup_rule_service import BreakupRuleService
from .notification_service import NotificationService
from .notification_dispatcher import NotificationDispatcher

__all__ = [
    "RoleService",
    "EmployeeService",
    "OrgUnitService",
    "SalaryService",
    "SellerService",
    "BusinessApiClient",
    "BreakupRuleService",
    "NotificationService",
    "NotificationDispatcher",
]

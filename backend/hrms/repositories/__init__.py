"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection
from .employee_repo import EmployeeRepository
from .role_repo import RoleRepository, RoleAssignmentRepository
from .notification_repo import NotificationRuleRepository, NotificationRepository
from .salary_repo import SalaryBreakupRepository
from .org_unit_repo import OrgUnitRepository
from .seller_repo import SellerRepository
from .breakup_rule_repo import BreakupRuleRepository

__all__ = [
    "get_database",
    "get_collection",
    "EmployeeRepository",
    "RoleRepository",
    "RoleAssignmentRepository",
    "NotificationRuleRepository",
    "NotificationRepository",
    "SalaryBreakupRepository",
    "OrgUnitRepository",
    "SellerRepository",
    "BreakupRuleRepository",
]

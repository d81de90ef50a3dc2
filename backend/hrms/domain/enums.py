"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class DepartmentCode(str, Enum):
    """Department codes used on roles, assignments and org units"""
    HR = "HR"
    FINANCE = "Finance"
    BUSINESS_OPERATION = "BusinessOperation"
    IT = "IT"
    COMPLIANCE = "Compliance"
    ALL = "All"


class HierarchyStatus(str, Enum):
    """Hierarchy level names, indexed by org unit depth"""
    OFFICES = "Offices"
    GROUPS = "Groups"
    DIVISIONS = "Divisions"
    DEPARTMENTS = "Departments"
    BRANCHES = "Branches"
    CELLS = "Cells"
    DESKS = "Desks"  # Anything deeper than Cells


class EventType(str, Enum):
    """Business events that can trigger notifications"""
    # Business operations
    BIZ_ORDER_CREATED = "BIZ_ORDER_CREATED"
    BIZ_ORDER_RETURN_EXPIRED = "BIZ_ORDER_RETURN_EXPIRED"
    BIZ_INVENTORY_LOW = "BIZ_INVENTORY_LOW"
    BIZ_CUSTOMER_COMPLAINT = "BIZ_CUSTOMER_COMPLAINT"
    # Finance
    FINANCE_SALARY_PROCESSED = "FINANCE_SALARY_PROCESSED"
    FINANCE_SALARY_PAID = "FINANCE_SALARY_PAID"
    FINANCE_SALARY_PENDING = "FINANCE_SALARY_PENDING"
    FINANCE_EXPENSE_SUBMITTED = "FINANCE_EXPENSE_SUBMITTED"
    FINANCE_BUDGET_EXCEEDED = "FINANCE_BUDGET_EXCEEDED"
    FINANCE_INVOICE_OVERDUE = "FINANCE_INVOICE_OVERDUE"
    FINANCE_MONTH_END_CLOSING = "FINANCE_MONTH_END_CLOSING"
    # HR
    HR_LEAVE_REQUESTED = "HR_LEAVE_REQUESTED"
    HR_LEAVE_APPROVED = "HR_LEAVE_APPROVED"
    HR_LEAVE_REJECTED = "HR_LEAVE_REJECTED"
    HR_EMPLOYEE_ONBOARDED = "HR_EMPLOYEE_ONBOARDED"
    HR_ROLE_ASSIGNED = "HR_ROLE_ASSIGNED"
    HR_CONTRACT_EXPIRING = "HR_CONTRACT_EXPIRING"
    HR_PROBATION_ENDING = "HR_PROBATION_ENDING"
    HR_PERFORMANCE_REVIEW_DUE = "HR_PERFORMANCE_REVIEW_DUE"
    HR_BIRTHDAY_REMINDER = "HR_BIRTHDAY_REMINDER"
    # Cross-cutting
    APPROVAL_REQUIRED = "APPROVAL_REQUIRED"
    TASK_ASSIGNED = "TASK_ASSIGNED"
    DEADLINE_APPROACHING = "DEADLINE_APPROACHING"
    SYSTEM_ALERT = "SYSTEM_ALERT"
    SYSTEM_MAINTENANCE = "SYSTEM_MAINTENANCE"


class TargetingStrategy(str, Enum):
    """How a notification rule selects its recipients"""
    GLOBAL_ROLES = "global_roles"
    DEPARTMENT_ROLES = "department_roles"
    SPECIFIC_USERS = "specific_users"
    DEPARTMENT_ALL = "department_all"


class NotificationPriority(str, Enum):
    """Notification priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class NotificationStatus(str, Enum):
    """Notification delivery status"""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class SalaryType(str, Enum):
    """Pay basis of a salary rule"""
    MONTHLY = "monthly"
    HOURLY = "hourly"


class ComponentType(str, Enum):
    """Value kind of a salary component"""
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class BreakdownCategory(str, Enum):
    """Category of a computed breakup line item"""
    BASE = "base"
    ALLOWANCE = "allowance"
    DEDUCTION = "deduction"
    TERMINAL = "terminal"
    NET = "net"


class IncrementType(str, Enum):
    """Increment kinds allowed on a transaction breakup rule"""
    FIXED = "fixed"
    PERCENTAGE = "percentage"
    BOTH = "both"


class SplitType(str, Enum):
    """Component kind of a breakup rule split"""
    ALLOWANCE = "allowance"
    DEDUCTION = "deduction"
    TERMINAL = "terminal"


class DebitOrCredit(str, Enum):
    """Ledger side for splits and mirrors"""
    DEBIT = "debit"
    CREDIT = "credit"

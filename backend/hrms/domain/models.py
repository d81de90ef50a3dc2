"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, EmailStr, ConfigDict

from .enums import (
    DepartmentCode, HierarchyStatus, EventType, TargetingStrategy,
    NotificationPriority, NotificationStatus, SalaryType, ComponentType,
    BreakdownCategory, IncrementType, SplitType, DebitOrCredit
)


# Stored documents keep enum values as plain strings so they round-trip through MongoDB
STORED = ConfigDict(extra="ignore", use_enum_values=True)


# ============================================================================
# People & Roles
# ============================================================================

class Employee(BaseModel):
    """Finalized employee record (directory entry)"""
    model_config = STORED

    employee_id: str = Field(..., description="Unique employee ID")
    name: str = Field(..., description="Display name")
    email: Optional[EmailStr] = Field(None, description="Contact address for notifications")
    department_code: Optional[DepartmentCode] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class SalaryComponent(BaseModel):
    """One allowance, deduction or terminal benefit"""
    model_config = STORED

    name: str = Field(..., min_length=1)
    type: ComponentType = Field(..., description="fixed amount or percentage of base")
    value: float


class SalaryRules(BaseModel):
    """Compensation rule set attached to a role"""
    model_config = STORED

    base_salary: float = Field(..., ge=0)
    salary_type: SalaryType = SalaryType.MONTHLY
    allowances: List[SalaryComponent] = Field(default_factory=list)
    deductions: List[SalaryComponent] = Field(default_factory=list)
    terminal_benefits: List[SalaryComponent] = Field(default_factory=list)


class Role(BaseModel):
    """Role definition, optionally carrying salary rules"""
    model_config = STORED

    role_id: str
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    department_code: Optional[DepartmentCode] = None
    salary_rules: Optional[SalaryRules] = None
    created_at: Optional[datetime] = None


class RoleAssignment(BaseModel):
    """
    Time-bounded grant of a role to an employee.

    Assignments are never physically deleted; they end by clearing
    `is_active` or by `effective_until` lapsing.
    """
    model_config = STORED

    assignment_id: str
    employee_id: str
    role_id: str
    org_unit_id: Optional[str] = None
    department_code: DepartmentCode
    status: Optional[HierarchyStatus] = Field(None, description="Hierarchy level of the assignment")
    assigned_at: datetime
    effective_from: datetime
    effective_until: Optional[datetime] = None
    is_active: bool = True
    assigned_by: Optional[str] = None
    notes: str = ""


# ============================================================================
# Notifications
# ============================================================================

class NotificationTemplate(BaseModel):
    """Title/message pair with {{placeholder}} tokens"""
    model_config = STORED

    title: str = ""
    message: str = ""


class NotificationRule(BaseModel):
    """Per-event targeting configuration"""
    model_config = STORED

    rule_id: str
    event_type: EventType
    strategy: str = Field(TargetingStrategy.GLOBAL_ROLES.value, description="Targeting strategy name")
    target_roles: List[str] = Field(default_factory=list, description="Role IDs or role names")
    department_filter: Optional[str] = None
    status_filter: Optional[HierarchyStatus] = Field(None, description="Hierarchy level filter")
    target_user_ids: List[str] = Field(default_factory=list)
    template: NotificationTemplate = Field(default_factory=NotificationTemplate)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    enabled: bool = True
    created_at: Optional[datetime] = None


class Recipient(BaseModel):
    """Resolved recipient identity"""
    model_config = STORED

    employee_id: str
    name: str
    email: Optional[str] = None


class NotificationRecipient(Recipient):
    """Recipient snapshot with per-recipient read state"""
    read: bool = False
    read_at: Optional[datetime] = None


class Notification(BaseModel):
    """Persisted notification; recipients are fixed at creation time"""
    model_config = STORED

    notification_id: str
    event_type: str
    title: str
    message: str
    department: str
    recipients: List[NotificationRecipient] = Field(default_factory=list)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    action_url: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    status: NotificationStatus = NotificationStatus.PENDING
    rule_id: Optional[str] = None
    created_at: datetime


# ============================================================================
# Salary
# ============================================================================

class BreakdownItem(BaseModel):
    """One computed line of a salary breakup"""
    model_config = STORED

    name: str
    category: BreakdownCategory
    value: float
    calculation: str
    exclude_from_totals: bool = False


class CalculatedBreakup(BaseModel):
    """Result of running the salary calculator"""
    model_config = STORED

    breakdown: List[BreakdownItem] = Field(default_factory=list)
    total_allowances: float = 0
    total_deductions: float = 0
    net_salary: float = 0


class BreakupFile(BaseModel):
    """Salary breakup for one employee and one pay period"""
    model_config = STORED

    breakup_id: str
    employee_id: str
    role_id: str
    month: str
    year: int
    salary_rules: SalaryRules
    calculated_breakup: CalculatedBreakup
    paid_at: Optional[datetime] = None
    paid_month: Optional[str] = None
    paid_year: Optional[int] = None
    paid_time: Optional[str] = None
    created_at: datetime


# ============================================================================
# Organization
# ============================================================================

class OrgUnit(BaseModel):
    """Node of the organizational hierarchy (parent_id None = root)"""
    model_config = STORED

    org_unit_id: str
    name: str
    parent_id: Optional[str] = None
    department_code: DepartmentCode = DepartmentCode.ALL
    level: int = Field(0, ge=0)
    status: HierarchyStatus = HierarchyStatus.OFFICES
    path: str = ""
    role_assignment_id: Optional[str] = None
    description: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None


# ============================================================================
# Sellers
# ============================================================================

class Seller(BaseModel):
    """Local mirror of a business-side seller"""
    model_config = STORED

    seller_id: str
    business_seller_id: int
    name: str
    email: Optional[str] = None
    total_orders: int = 0
    pending_orders: int = 0
    paid_orders: int = 0
    total_receivable_amount: float = 0
    paid_receivable_amount: float = 0
    remaining_receivable_amount: float = 0
    current_balance: float = 0
    last_payment_date: Optional[datetime] = None
    last_synced_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


# ============================================================================
# Transaction Breakup Rules
# ============================================================================

class Mirror(BaseModel):
    """Mirror ledger entry attached to a split"""
    model_config = STORED

    mirror_id: str
    field_line_id: Optional[int] = None
    summary_id: Optional[int] = None
    debit_or_credit: Optional[DebitOrCredit] = None


class Split(BaseModel):
    """One component of a transaction breakup rule"""
    model_config = STORED

    split_id: str
    component_name: str
    type: Optional[SplitType] = None
    field_line_id: Optional[int] = None
    summary_id: Optional[int] = None
    debit_or_credit: DebitOrCredit
    percentage: float = 0
    fixed_amount: float = 0
    mirrors: List[Mirror] = Field(default_factory=list)


class BreakupRule(BaseModel):
    """How a transaction type is split across ledger lines"""
    model_config = STORED

    rule_id: str
    transaction_type: str
    increment_type: IncrementType = IncrementType.BOTH
    splits: List[Split] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# Events
# ============================================================================

class Event(BaseModel):
    """Business event routed to registered handlers"""
    model_config = ConfigDict(extra="forbid")

    event_type: EventType
    payload: Dict[str, Any] = Field(default_factory=dict)
    occurred_at: Optional[datetime] = None

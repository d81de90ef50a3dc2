"""
In-memory repositories

Each fake mirrors the public methods of its MongoDB repository so services
can be exercised without a database. Stored models are deep-copied on the
way in and out, like documents round-tripping through a collection.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from hrms.domain.errors import AlreadyExistsError, DuplicateBreakupError
from hrms.domain.models import (
    BreakupFile, BreakupRule, Employee, Notification, NotificationRule,
    OrgUnit, Role, RoleAssignment, SalaryRules, Seller
)
from hrms.utils.idgen import generate_seller_id
from hrms.utils.time import utc_now


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _copy(model):
    return model.model_copy(deep=True)


class FakeEmployeeRepository:
    def __init__(self):
        self.employees: Dict[str, Employee] = {}

    def create_employee(self, employee: Employee) -> Employee:
        if employee.employee_id in self.employees:
            raise AlreadyExistsError(f"Employee {employee.employee_id} already exists")
        self.employees[employee.employee_id] = _copy(employee)
        return employee

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        employee = self.employees.get(employee_id)
        return _copy(employee) if employee else None

    def get_employees_by_ids(self, employee_ids: List[str]) -> List[Employee]:
        wanted = set(employee_ids)
        return [_copy(e) for e in self.employees.values() if e.employee_id in wanted]

    def list_employees(
        self,
        department_code: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Employee]:
        employees = [
            e for e in self.employees.values()
            if not department_code or e.department_code == department_code
        ]
        employees.sort(key=lambda e: e.name)
        return [_copy(e) for e in employees[skip:skip + limit]]


class FakeRoleRepository:
    def __init__(self):
        self.roles: Dict[str, Role] = {}

    def create_role(self, role: Role) -> Role:
        if any(r.name == role.name for r in self.roles.values()):
            raise AlreadyExistsError(f"Role '{role.name}' already exists")
        self.roles[role.role_id] = _copy(role)
        return role

    def get_role(self, role_id: str) -> Optional[Role]:
        role = self.roles.get(role_id)
        return _copy(role) if role else None

    def get_role_by_name(self, name: str) -> Optional[Role]:
        for role in self.roles.values():
            if role.name == name:
                return _copy(role)
        return None

    def list_roles(self) -> List[Role]:
        return [_copy(r) for r in sorted(self.roles.values(), key=lambda r: r.name)]

    def find_role_ids(self, identifiers: List[str]) -> List[str]:
        wanted = set(identifiers)
        return [r.role_id for r in self.roles.values() if r.role_id in wanted or r.name in wanted]

    def update_salary_rules(self, role_id: str, salary_rules: SalaryRules) -> Optional[Role]:
        role = self.roles.get(role_id)
        if role is None:
            return None
        role.salary_rules = _copy(salary_rules)
        return _copy(role)

    def delete_role(self, role_id: str) -> bool:
        return self.roles.pop(role_id, None) is not None


class FakeRoleAssignmentRepository:
    def __init__(self):
        self.assignments: Dict[str, RoleAssignment] = {}

    def create_assignment(self, assignment: RoleAssignment) -> RoleAssignment:
        self.assignments[assignment.assignment_id] = _copy(assignment)
        return assignment

    def get_assignment(self, assignment_id: str) -> Optional[RoleAssignment]:
        assignment = self.assignments.get(assignment_id)
        return _copy(assignment) if assignment else None

    def list_for_employee(self, employee_id: str) -> List[RoleAssignment]:
        found = [a for a in self.assignments.values() if a.employee_id == employee_id]
        found.sort(key=lambda a: a.assigned_at, reverse=True)
        return [_copy(a) for a in found]

    def end_assignment(self, assignment_id: str, ended_at: datetime) -> Optional[RoleAssignment]:
        assignment = self.assignments.get(assignment_id)
        if assignment is None:
            return None
        assignment.is_active = False
        assignment.effective_until = ended_at
        return _copy(assignment)

    def find_current_assignments(
        self,
        now: datetime,
        role_ids: Optional[List[str]] = None,
        department_code: Optional[str] = None,
        status: Optional[str] = None,
        org_unit_id: Optional[str] = None,
        employee_id: Optional[str] = None
    ) -> List[RoleAssignment]:
        found = []
        for a in self.assignments.values():
            if not a.is_active or a.effective_from > now:
                continue
            if a.effective_until is not None and a.effective_until < now:
                continue
            if role_ids is not None and a.role_id not in role_ids:
                continue
            if department_code and a.department_code != department_code:
                continue
            if status and a.status != status:
                continue
            if org_unit_id and a.org_unit_id != org_unit_id:
                continue
            if employee_id and a.employee_id != employee_id:
                continue
            found.append(_copy(a))
        return found

    def find_active_for_employee(self, employee_id: str) -> Optional[RoleAssignment]:
        for a in self.assignments.values():
            if a.employee_id == employee_id and a.is_active:
                return _copy(a)
        return None

    def find_active_by_org_units(self, org_unit_ids: List[str]) -> List[RoleAssignment]:
        found = [a for a in self.assignments.values() if a.is_active and a.org_unit_id in org_unit_ids]
        found.sort(key=lambda a: a.assigned_at)
        return [_copy(a) for a in found]

    def count_active_for_role(self, role_id: str) -> int:
        return sum(1 for a in self.assignments.values() if a.role_id == role_id and a.is_active)


class FakeNotificationRuleRepository:
    def __init__(self):
        self.rules: Dict[str, NotificationRule] = {}

    def create_rule(self, rule: NotificationRule) -> NotificationRule:
        self.rules[rule.rule_id] = _copy(rule)
        return rule

    def get_rule(self, rule_id: str) -> Optional[NotificationRule]:
        rule = self.rules.get(rule_id)
        return _copy(rule) if rule else None

    def list_rules(self, event_type: Optional[str] = None) -> List[NotificationRule]:
        return [_copy(r) for r in self.rules.values() if not event_type or r.event_type == event_type]

    def find_enabled_rules(self, event_type: str) -> List[NotificationRule]:
        return [_copy(r) for r in self.rules.values() if r.event_type == event_type and r.enabled]

    def replace_rule(self, rule: NotificationRule) -> NotificationRule:
        self.rules[rule.rule_id] = _copy(rule)
        return rule

    def delete_rule(self, rule_id: str) -> bool:
        return self.rules.pop(rule_id, None) is not None


class FakeNotificationRepository:
    def __init__(self):
        self.notifications: Dict[str, Notification] = {}

    def create_notification(self, notification: Notification) -> Notification:
        self.notifications[notification.notification_id] = _copy(notification)
        return notification

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        notification = self.notifications.get(notification_id)
        return _copy(notification) if notification else None

    def _entry(self, notification: Notification, employee_id: str):
        return next((r for r in notification.recipients if r.employee_id == employee_id), None)

    def get_notifications_for_employee(
        self,
        employee_id: str,
        read: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Notification]:
        found = []
        for n in self.notifications.values():
            entry = self._entry(n, employee_id)
            if entry is None or (read is not None and entry.read != read):
                continue
            found.append(n)
        found.sort(key=lambda n: n.created_at, reverse=True)
        return [_copy(n) for n in found[skip:skip + limit]]

    def get_unread_count(self, employee_id: str) -> int:
        count = 0
        for n in self.notifications.values():
            entry = self._entry(n, employee_id)
            if entry is not None and not entry.read:
                count += 1
        return count

    def mark_as_read(self, notification_id: str, employee_id: str) -> Optional[Notification]:
        notification = self.notifications.get(notification_id)
        entry = self._entry(notification, employee_id) if notification else None
        if entry is None:
            return None
        entry.read = True
        entry.read_at = utc_now()
        return _copy(notification)

    def mark_all_as_read(self, employee_id: str) -> int:
        updated = 0
        for n in self.notifications.values():
            entry = self._entry(n, employee_id)
            if entry is not None and not entry.read:
                entry.read = True
                entry.read_at = utc_now()
                updated += 1
        return updated

    def remove_recipient(self, notification_id: str, employee_id: str) -> Optional[Notification]:
        notification = self.notifications.get(notification_id)
        if notification is None or self._entry(notification, employee_id) is None:
            return None
        notification.recipients = [r for r in notification.recipients if r.employee_id != employee_id]
        return _copy(notification)

    def delete_notification(self, notification_id: str) -> bool:
        return self.notifications.pop(notification_id, None) is not None


class FakeSalaryBreakupRepository:
    def __init__(self):
        self.breakups: Dict[str, BreakupFile] = {}

    def create_breakup(self, breakup: BreakupFile) -> BreakupFile:
        for b in self.breakups.values():
            if (b.employee_id, b.month, b.year) == (breakup.employee_id, breakup.month, breakup.year):
                raise DuplicateBreakupError(
                    f"Salary for {breakup.month} {breakup.year} already exists for this employee"
                )
        self.breakups[breakup.breakup_id] = _copy(breakup)
        return breakup

    def get_breakup(self, breakup_id: str) -> Optional[BreakupFile]:
        breakup = self.breakups.get(breakup_id)
        return _copy(breakup) if breakup else None

    def find_for_period(self, employee_id: str, month: str, year: int) -> Optional[BreakupFile]:
        for b in self.breakups.values():
            if (b.employee_id, b.month, b.year) == (employee_id, month, year):
                return _copy(b)
        return None

    def get_latest_for_employee(self, employee_id: str) -> Optional[BreakupFile]:
        history = self.list_for_employee(employee_id)
        return history[0] if history else None

    def list_for_employee(self, employee_id: str) -> List[BreakupFile]:
        found = [b for b in self.breakups.values() if b.employee_id == employee_id]
        found.sort(key=lambda b: b.created_at, reverse=True)
        return [_copy(b) for b in found]

    def list_breakups(
        self,
        month: Optional[str] = None,
        year: Optional[int] = None,
        paid: Optional[bool] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[BreakupFile]:
        found = []
        for b in self.breakups.values():
            if month and b.month != month:
                continue
            if year is not None and b.year != year:
                continue
            if paid is not None and (b.paid_at is not None) != paid:
                continue
            found.append(b)
        found.sort(key=lambda b: b.created_at, reverse=True)
        return [_copy(b) for b in found[skip:skip + limit]]

    def mark_paid(
        self,
        breakup_id: str,
        paid_at: datetime,
        paid_month: str,
        paid_year: int,
        paid_time: str
    ) -> Optional[BreakupFile]:
        breakup = self.breakups.get(breakup_id)
        if breakup is None or breakup.paid_at is not None:
            return None
        breakup.paid_at = paid_at
        breakup.paid_month = paid_month
        breakup.paid_year = paid_year
        breakup.paid_time = paid_time
        return _copy(breakup)


class FakeOrgUnitRepository:
    def __init__(self):
        self.units: Dict[str, OrgUnit] = {}

    def create_org_unit(self, unit: OrgUnit) -> OrgUnit:
        self.units[unit.org_unit_id] = _copy(unit)
        return unit

    def get_org_unit(self, org_unit_id: str) -> Optional[OrgUnit]:
        unit = self.units.get(org_unit_id)
        return _copy(unit) if unit else None

    def list_org_units(self, department_code: Optional[str] = None) -> List[OrgUnit]:
        units = [u for u in self.units.values() if not department_code or u.department_code == department_code]
        units.sort(key=lambda u: (u.level, u.name))
        return [_copy(u) for u in units]

    def count_children(self, org_unit_id: str) -> int:
        return sum(1 for u in self.units.values() if u.parent_id == org_unit_id)

    def delete_org_unit(self, org_unit_id: str) -> bool:
        return self.units.pop(org_unit_id, None) is not None


class FakeSellerRepository:
    def __init__(self):
        self.sellers: Dict[str, Seller] = {}

    def upsert_by_business_id(
        self,
        business_seller_id: int,
        name: str,
        email: Optional[str],
        synced_at: datetime
    ) -> bool:
        for seller in self.sellers.values():
            if seller.business_seller_id == business_seller_id:
                seller.name = name
                seller.email = email
                seller.last_synced_at = synced_at
                return False
        seller_id = generate_seller_id()
        self.sellers[seller_id] = Seller(
            seller_id=seller_id,
            business_seller_id=business_seller_id,
            name=name,
            email=email,
            last_synced_at=synced_at,
            created_at=synced_at
        )
        return True

    def create_seller(self, seller: Seller) -> Seller:
        self.sellers[seller.seller_id] = _copy(seller)
        return seller

    def get_seller(self, seller_id: str) -> Optional[Seller]:
        seller = self.sellers.get(seller_id)
        return _copy(seller) if seller else None

    def get_by_business_id(self, business_seller_id: int) -> Optional[Seller]:
        for seller in self.sellers.values():
            if seller.business_seller_id == business_seller_id:
                return _copy(seller)
        return None

    def list_sellers(self) -> List[Seller]:
        return [_copy(s) for s in self.sellers.values()]


class FakeBreakupRuleRepository:
    def __init__(self):
        self.rules: Dict[str, BreakupRule] = {}

    def create_rule(self, rule: BreakupRule) -> BreakupRule:
        self.rules[rule.rule_id] = _copy(rule)
        return rule

    def get_rule(self, rule_id: str) -> Optional[BreakupRule]:
        rule = self.rules.get(rule_id)
        return _copy(rule) if rule else None

    def list_rules(self) -> List[BreakupRule]:
        return [_copy(r) for r in sorted(self.rules.values(), key=lambda r: r.transaction_type)]

    def save_rule(self, rule: BreakupRule) -> BreakupRule:
        self.rules[rule.rule_id] = _copy(rule)
        return rule

    def delete_rule(self, rule_id: str) -> bool:
        return self.rules.pop(rule_id, None) is not None

"""Default Event Handlers - How each business event becomes notifications

Most events go through rule-driven dispatch. A few have fixed audiences
(the affected employee, a department, a well-known role) and use direct
sends with a prepared title and message.
"""
from typing import Any, Dict, Optional

from ..domain.models import Event
from ..domain.enums import DepartmentCode, EventType, NotificationPriority
from ..services.notification_dispatcher import NotificationDispatcher
from ..utils.logger import get_logger
from ..utils.time import days_until
from .router import EventRouter

logger = get_logger(__name__)

# Events fully described by notification rules
RULE_DRIVEN_EVENTS = (
    EventType.BIZ_ORDER_CREATED,
    EventType.BIZ_ORDER_RETURN_EXPIRED,
    EventType.BIZ_CUSTOMER_COMPLAINT,
    EventType.FINANCE_INVOICE_OVERDUE,
    EventType.FINANCE_EXPENSE_SUBMITTED,
    EventType.HR_LEAVE_REQUESTED,
    EventType.HR_PERFORMANCE_REVIEW_DUE,
    EventType.APPROVAL_REQUIRED,
)

INVENTORY_MANAGER = "Inventory Manager"
FINANCE_MANAGER = "Finance Manager"
ACCOUNTANT = "Accountant"
HR_MANAGER = "HR Manager"
DEPARTMENT_HEAD = "Department Head"
EXECUTIVE = "Executive"


def _with(payload: Dict[str, Any], **overrides: Any) -> Dict[str, Any]:
    merged = dict(payload)
    merged.update(overrides)
    return merged


def _text(value: Optional[Any]) -> str:
    return "" if value is None else str(value)


def _days_remaining(payload: Dict[str, Any]) -> Optional[Any]:
    """days_remaining as sent, else derived from an ISO expiry_date"""
    if payload.get("days_remaining") is not None:
        return payload["days_remaining"]
    expiry = payload.get("expiry_date")
    if not expiry:
        return None
    try:
        return days_until(expiry)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Unparseable expiry_date {expiry!r}", extra={"event_type": "HR_CONTRACT_EXPIRING"})
        return None


class NotificationHandlers:
    """Event handlers backed by a notification dispatcher"""

    def __init__(self, dispatcher: Optional[NotificationDispatcher] = None):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> NotificationDispatcher:
        # Built on first event so wiring the router never touches the database
        if self._dispatcher is None:
            self._dispatcher = NotificationDispatcher()
        return self._dispatcher

    def register(self, router: EventRouter) -> EventRouter:
        """Attach every default handler to the router"""
        for event_type in RULE_DRIVEN_EVENTS:
            router.register(event_type, self.dispatch_rules)

        router.register(EventType.BIZ_INVENTORY_LOW, self.inventory_low)
        router.register(EventType.FINANCE_SALARY_PROCESSED, self.salary_processed)
        router.register(EventType.FINANCE_SALARY_PAID, self.salary_paid)
        router.register(EventType.FINANCE_SALARY_PENDING, self.salary_pending)
        router.register(EventType.FINANCE_BUDGET_EXCEEDED, self.budget_exceeded)
        router.register(EventType.FINANCE_MONTH_END_CLOSING, self.month_end_closing)
        router.register(EventType.HR_EMPLOYEE_ONBOARDED, self.employee_onboarded)
        router.register(EventType.HR_ROLE_ASSIGNED, self.role_assigned)
        router.register(EventType.HR_LEAVE_APPROVED, self.leave_approved)
        router.register(EventType.HR_LEAVE_REJECTED, self.leave_rejected)
        router.register(EventType.HR_CONTRACT_EXPIRING, self.contract_expiring)
        router.register(EventType.HR_PROBATION_ENDING, self.probation_ending)
        router.register(EventType.HR_BIRTHDAY_REMINDER, self.birthday_reminder)
        router.register(EventType.SYSTEM_MAINTENANCE, self.system_maintenance)
        router.register(EventType.SYSTEM_ALERT, self.system_alert)
        router.register(EventType.TASK_ASSIGNED, self.task_assigned)
        router.register(EventType.DEADLINE_APPROACHING, self.deadline_approaching)
        return router

    # =========================================================================
    # Rule-driven
    # =========================================================================

    def dispatch_rules(self, event: Event) -> None:
        self.dispatcher.dispatch(event.event_type, event.payload)

    # =========================================================================
    # Business operations
    # =========================================================================

    def inventory_low(self, event: Event) -> None:
        self.dispatcher.notify_department_role(
            INVENTORY_MANAGER, DepartmentCode.BUSINESS_OPERATION.value, event.event_type, event.payload
        )

    # =========================================================================
    # Finance
    # =========================================================================

    def salary_processed(self, event: Event) -> None:
        payload = event.payload
        self.dispatcher.notify_department(DepartmentCode.FINANCE.value, event.event_type, payload)

        employee_id = payload.get("employee_id")
        if employee_id:
            self.dispatcher.notify_employee(employee_id, event.event_type, _with(
                payload,
                title="Your Salary Has Been Processed",
                message=(
                    f"Your salary for {_text(payload.get('month'))} {_text(payload.get('year'))} "
                    f"has been processed. Net amount: {_text(payload.get('net_salary'))}"
                )
            ))

    def salary_paid(self, event: Event) -> None:
        payload = event.payload
        employee_id = payload.get("employee_id")
        if employee_id:
            self.dispatcher.notify_employee(employee_id, event.event_type, _with(
                payload,
                title="Salary Payment Received",
                message=(
                    f"Your salary for {_text(payload.get('month'))} {_text(payload.get('year'))} "
                    f"has been paid. Amount: {_text(payload.get('net_salary'))}"
                ),
                priority=NotificationPriority.HIGH.value
            ))

    def salary_pending(self, event: Event) -> None:
        for role in (FINANCE_MANAGER, ACCOUNTANT):
            self.dispatcher.notify_department_role(
                role, DepartmentCode.FINANCE.value, event.event_type, event.payload
            )

    def budget_exceeded(self, event: Event) -> None:
        self.dispatcher.notify_department_role(
            FINANCE_MANAGER, DepartmentCode.FINANCE.value, event.event_type, event.payload
        )
        self.dispatcher.notify_global_role(DEPARTMENT_HEAD, event.event_type, event.payload)

    def month_end_closing(self, event: Event) -> None:
        self.dispatcher.notify_department(DepartmentCode.FINANCE.value, event.event_type, event.payload)

    # =========================================================================
    # HR
    # =========================================================================

    def employee_onboarded(self, event: Event) -> None:
        payload = event.payload
        self.dispatcher.notify_department(DepartmentCode.HR.value, event.event_type, payload)

        employee_id = payload.get("employee_id")
        if employee_id:
            self.dispatcher.notify_employee(employee_id, event.event_type, _with(
                payload,
                title="Welcome to the Team!",
                message="Welcome aboard! We're excited to have you join us.",
                priority=NotificationPriority.HIGH.value
            ))

    def role_assigned(self, event: Event) -> None:
        payload = event.payload
        employee_id = payload.get("employee_id")
        if employee_id:
            self.dispatcher.notify_employee(employee_id, event.event_type, _with(
                payload,
                title="New Role Assigned",
                message=f"You have been assigned the role of {_text(payload.get('role_name'))}",
                priority=NotificationPriority.HIGH.value
            ))
        self.dispatcher.notify_department(DepartmentCode.HR.value, event.event_type, payload)

    def leave_approved(self, event: Event) -> None:
        payload = event.payload
        employee_id = payload.get("employee_id")
        if employee_id:
            self.dispatcher.notify_employee(employee_id, event.event_type, _with(
                payload,
                title="Leave Request Approved",
                message=(
                    f"Your leave request from {_text(payload.get('start_date'))} "
                    f"to {_text(payload.get('end_date'))} has been approved."
                ),
                priority=NotificationPriority.HIGH.value
            ))

    def leave_rejected(self, event: Event) -> None:
        payload = event.payload
        employee_id = payload.get("employee_id")
        if employee_id:
            self.dispatcher.notify_employee(employee_id, event.event_type, _with(
                payload,
                title="Leave Request Not Approved",
                message=(
                    f"Your leave request from {_text(payload.get('start_date'))} "
                    f"to {_text(payload.get('end_date'))} was not approved. "
                    f"{_text(payload.get('reason'))}"
                ).strip(),
                priority=NotificationPriority.HIGH.value
            ))

    def contract_expiring(self, event: Event) -> None:
        payload = event.payload
        days_remaining = _days_remaining(payload)
        if days_remaining is not None:
            payload = _with(payload, days_remaining=days_remaining)
        self.dispatcher.notify_department_role(
            HR_MANAGER, DepartmentCode.HR.value, event.event_type, payload
        )

        employee_id = payload.get("employee_id")
        if employee_id:
            self.dispatcher.notify_employee(employee_id, event.event_type, _with(
                payload,
                title="Contract Expiration Notice",
                message=(
                    f"Your contract expires in {_text(payload.get('days_remaining'))} days. "
                    "Please contact HR."
                )
            ))

    def probation_ending(self, event: Event) -> None:
        self.dispatcher.notify_department_role(
            HR_MANAGER, DepartmentCode.HR.value, event.event_type, event.payload
        )

    def birthday_reminder(self, event: Event) -> None:
        department = event.payload.get("department_code")
        if department and department.upper() != "ALL":
            self.dispatcher.notify_department(department, event.event_type, event.payload)

    # =========================================================================
    # Cross-department
    # =========================================================================

    def system_maintenance(self, event: Event) -> None:
        for department in (
            DepartmentCode.HR.value,
            DepartmentCode.FINANCE.value,
            DepartmentCode.BUSINESS_OPERATION.value,
        ):
            self.dispatcher.notify_department(department, event.event_type, event.payload)

    def system_alert(self, event: Event) -> None:
        payload = event.payload
        self.dispatcher.notify_global_role(EXECUTIVE, event.event_type, _with(
            payload,
            title="System Alert",
            message=_text(payload.get("message")),
            priority=NotificationPriority.CRITICAL.value
        ))

    def task_assigned(self, event: Event) -> None:
        payload = event.payload
        assignee = payload.get("assigned_to")
        if assignee:
            self.dispatcher.notify_employee(assignee, event.event_type, _with(
                payload,
                title="New Task Assigned",
                message=f"You have been assigned a new task: {_text(payload.get('task_title'))}",
                priority=NotificationPriority.MEDIUM.value
            ))

    def deadline_approaching(self, event: Event) -> None:
        payload = event.payload
        assignee = payload.get("assigned_to")
        if not assignee:
            return

        days_remaining = payload.get("days_remaining")
        urgent = isinstance(days_remaining, (int, float)) and days_remaining <= 1
        self.dispatcher.notify_employee(assignee, event.event_type, _with(
            payload,
            title="Deadline Approaching",
            message=(
                f"Task \"{_text(payload.get('task_title'))}\" is due in "
                f"{_text(days_remaining)} days."
            ),
            priority=(NotificationPriority.CRITICAL if urgent else NotificationPriority.HIGH).value
        ))


def register_default_handlers(
    router: EventRouter,
    dispatcher: Optional[NotificationDispatcher] = None
) -> EventRouter:
    """Wire the standard notification handlers into a router"""
    return NotificationHandlers(dispatcher).register(router)

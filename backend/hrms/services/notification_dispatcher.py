"""Notification Dispatcher - Rule-driven and direct notification fan-out

For each enabled rule of an incoming event: resolve recipients, render the
rule's templates, and persist one notification. Rules are processed
independently; a failing rule is logged and the rest still run. There is no
cross-rule atomicity.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from ..domain.models import Notification, NotificationRecipient, NotificationRule, Recipient
from ..domain.enums import EventType, NotificationPriority, NotificationStatus, DepartmentCode
from ..engine.recipient_resolver import RecipientResolver
from ..engine.template_renderer import TemplateRenderer
from ..repositories.notification_repo import NotificationRepository, NotificationRuleRepository
from ..utils.idgen import generate_notification_id
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


# Department a notification is filed under when its rule names none
EVENT_DEPARTMENTS: Dict[str, str] = {
    EventType.BIZ_ORDER_CREATED.value: DepartmentCode.BUSINESS_OPERATION.value,
    EventType.BIZ_ORDER_RETURN_EXPIRED.value: DepartmentCode.BUSINESS_OPERATION.value,
    EventType.BIZ_INVENTORY_LOW.value: DepartmentCode.BUSINESS_OPERATION.value,
    EventType.BIZ_CUSTOMER_COMPLAINT.value: DepartmentCode.BUSINESS_OPERATION.value,
    EventType.FINANCE_SALARY_PROCESSED.value: DepartmentCode.FINANCE.value,
    EventType.FINANCE_SALARY_PAID.value: DepartmentCode.FINANCE.value,
    EventType.FINANCE_SALARY_PENDING.value: DepartmentCode.FINANCE.value,
    EventType.FINANCE_EXPENSE_SUBMITTED.value: DepartmentCode.FINANCE.value,
    EventType.FINANCE_BUDGET_EXCEEDED.value: DepartmentCode.FINANCE.value,
    EventType.FINANCE_INVOICE_OVERDUE.value: DepartmentCode.FINANCE.value,
    EventType.FINANCE_MONTH_END_CLOSING.value: DepartmentCode.FINANCE.value,
    EventType.HR_LEAVE_REQUESTED.value: DepartmentCode.HR.value,
    EventType.HR_LEAVE_APPROVED.value: DepartmentCode.HR.value,
    EventType.HR_LEAVE_REJECTED.value: DepartmentCode.HR.value,
    EventType.HR_EMPLOYEE_ONBOARDED.value: DepartmentCode.HR.value,
    EventType.HR_ROLE_ASSIGNED.value: DepartmentCode.HR.value,
    EventType.HR_CONTRACT_EXPIRING.value: DepartmentCode.HR.value,
    EventType.HR_PROBATION_ENDING.value: DepartmentCode.HR.value,
    EventType.HR_PERFORMANCE_REVIEW_DUE.value: DepartmentCode.HR.value,
    EventType.HR_BIRTHDAY_REMINDER.value: DepartmentCode.HR.value,
}

# Upper-case on purpose: stored notification departments use "ALL", unlike DepartmentCode.ALL ("All")
FALLBACK_DEPARTMENT = "ALL"


def event_key(event_type: Union[EventType, str]) -> str:
    """Plain string form of an event type"""
    return event_type.value if isinstance(event_type, EventType) else str(event_type)


def department_for(event_type: Union[EventType, str], department_filter: Optional[str] = None) -> str:
    """Rule filter first, then the static event map, then ALL"""
    if department_filter:
        return department_filter
    return EVENT_DEPARTMENTS.get(event_key(event_type), FALLBACK_DEPARTMENT)


def default_title(event_type: Union[EventType, str]) -> str:
    """'FINANCE_SALARY_PAID' -> 'Finance Salary Paid'"""
    return event_key(event_type).replace("_", " ").title()


def _priority(value: Any) -> NotificationPriority:
    try:
        return NotificationPriority(value)
    except ValueError:
        return NotificationPriority.MEDIUM


class NotificationDispatcher:
    """Turns business events into persisted notifications"""

    def __init__(
        self,
        rule_repo: Optional[NotificationRuleRepository] = None,
        notification_repo: Optional[NotificationRepository] = None,
        resolver: Optional[RecipientResolver] = None,
        renderer: Optional[TemplateRenderer] = None
    ):
        self.rule_repo = rule_repo or NotificationRuleRepository()
        self.notification_repo = notification_repo or NotificationRepository()
        self.resolver = resolver or RecipientResolver()
        self.renderer = renderer or TemplateRenderer()

    # =========================================================================
    # Rule-driven dispatch
    # =========================================================================

    def dispatch(
        self,
        event_type: Union[EventType, str],
        payload: Dict[str, Any],
        now: Optional[datetime] = None
    ) -> List[Notification]:
        """
        Create notifications for every enabled rule of the event

        Returns:
            One notification per rule that resolved at least one recipient
        """
        key = event_key(event_type)
        payload = payload or {}
        rules = self.rule_repo.find_enabled_rules(key)

        if not rules:
            logger.info(f"No enabled notification rules for {key}", extra={"event_type": key})
            return []

        created = []
        for rule in rules:
            try:
                notification = self._dispatch_rule(rule, key, payload, now)
            except Exception as e:
                logger.error(
                    f"Notification rule {rule.rule_id} failed: {e}",
                    extra={"event_type": key, "rule_id": rule.rule_id},
                    exc_info=True
                )
                continue
            if notification is not None:
                created.append(notification)

        logger.info(
            f"Dispatched {len(created)} of {len(rules)} rules for {key}",
            extra={"event_type": key}
        )
        return created

    def _dispatch_rule(
        self,
        rule: NotificationRule,
        key: str,
        payload: Dict[str, Any],
        now: Optional[datetime]
    ) -> Optional[Notification]:
        recipients = self.resolver.resolve(rule, payload, now=now)
        if not recipients:
            logger.info(
                "Rule resolved no recipients, skipping",
                extra={"event_type": key, "rule_id": rule.rule_id, "strategy": rule.strategy}
            )
            return None

        return self._persist(
            key,
            title=self.renderer.render(rule.template.title, payload),
            message=self.renderer.render(rule.template.message, payload),
            department=department_for(key, rule.department_filter),
            recipients=recipients,
            priority=rule.priority,
            payload=payload,
            rule_id=rule.rule_id
        )

    # =========================================================================
    # Direct sends (no rule lookup, no templating)
    # =========================================================================

    def notify_global_role(
        self,
        role: str,
        event_type: Union[EventType, str],
        payload: Dict[str, Any]
    ) -> Optional[Notification]:
        """Notify every holder of a role, across departments"""
        recipients = self.resolver.for_roles([role])
        return self._send_direct(recipients, event_type, department_for(event_type), payload)

    def notify_department_role(
        self,
        role: str,
        department: str,
        event_type: Union[EventType, str],
        payload: Dict[str, Any]
    ) -> Optional[Notification]:
        """Notify holders of a role within one department"""
        recipients = self.resolver.for_roles([role], department=department)
        return self._send_direct(recipients, event_type, department, payload)

    def notify_department(
        self,
        department: str,
        event_type: Union[EventType, str],
        payload: Dict[str, Any]
    ) -> Optional[Notification]:
        """Notify everyone assigned to a department"""
        recipients = self.resolver.for_department(department)
        return self._send_direct(recipients, event_type, department, payload)

    def notify_employee(
        self,
        employee_id: str,
        event_type: Union[EventType, str],
        payload: Dict[str, Any]
    ) -> Optional[Notification]:
        """Notify a single employee"""
        recipients = self.resolver.for_employees([employee_id])
        return self._send_direct(recipients, event_type, department_for(event_type), payload)

    def _send_direct(
        self,
        recipients: List[Recipient],
        event_type: Union[EventType, str],
        department: str,
        payload: Dict[str, Any]
    ) -> Optional[Notification]:
        key = event_key(event_type)
        payload = payload or {}
        if not recipients:
            logger.info("Direct notification has no recipients", extra={"event_type": key})
            return None

        return self._persist(
            key,
            title=payload.get("title") or default_title(key),
            message=payload.get("message") or payload.get("description") or "",
            department=department,
            recipients=recipients,
            priority=_priority(payload.get("priority", NotificationPriority.MEDIUM.value)),
            payload=payload
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def _persist(
        self,
        key: str,
        title: str,
        message: str,
        department: str,
        recipients: List[Recipient],
        priority: Union[NotificationPriority, str],
        payload: Dict[str, Any],
        rule_id: Optional[str] = None
    ) -> Notification:
        notification = Notification(
            notification_id=generate_notification_id(),
            event_type=key,
            title=title,
            message=message,
            department=department,
            recipients=[
                NotificationRecipient(**r.model_dump(), read=False) for r in recipients
            ],
            priority=priority,
            action_url=payload.get("action_url"),
            metadata=dict(payload),
            status=NotificationStatus.SENT,
            rule_id=rule_id,
            created_at=utc_now()
        )
        return self.notification_repo.create_notification(notification)

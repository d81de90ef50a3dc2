"""Notification Service - Per-employee inbox and notification rule management

Read state is tracked per recipient, so every inbox view is computed for
one employee: the same notification can be read for one recipient and
unread for another.
"""
from typing import Any, Dict, List, Optional

from ..domain.models import Notification, NotificationRule, NotificationTemplate
from ..domain.enums import EventType, NotificationPriority, TargetingStrategy
from ..domain.errors import NotificationNotFoundError, ValidationError
from ..repositories.notification_repo import NotificationRepository, NotificationRuleRepository
from ..utils.idgen import generate_notification_rule_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


KNOWN_STRATEGIES = {s.value for s in TargetingStrategy}


def inbox_item(notification: Notification, employee_id: str) -> Dict[str, Any]:
    """Flatten a notification into the employee's view of it"""
    entry = next((r for r in notification.recipients if r.employee_id == employee_id), None)
    item = notification.model_dump(exclude={"recipients"})
    item["read"] = entry.read if entry else False
    item["read_at"] = entry.read_at if entry else None
    item["recipient_count"] = len(notification.recipients)
    return item


class NotificationService:
    """Service for the notification inbox and rule catalogue"""

    def __init__(
        self,
        repo: Optional[NotificationRepository] = None,
        rule_repo: Optional[NotificationRuleRepository] = None
    ):
        self.repo = repo or NotificationRepository()
        self.rule_repo = rule_repo or NotificationRuleRepository()

    # =========================================================================
    # Inbox
    # =========================================================================

    def get_notifications(
        self,
        employee_id: str,
        read: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Dict[str, Any]]:
        """Notifications addressed to the employee, newest first"""
        notifications = self.repo.get_notifications_for_employee(employee_id, read, skip, limit)
        return [inbox_item(n, employee_id) for n in notifications]

    def get_unread_count(self, employee_id: str) -> int:
        """Unread notification count for the employee"""
        return self.repo.get_unread_count(employee_id)

    def mark_as_read(self, notification_id: str, employee_id: str) -> Dict[str, Any]:
        """Mark one notification read for the employee only"""
        notification = self.repo.mark_as_read(notification_id, employee_id)
        if notification is None:
            raise NotificationNotFoundError(
                f"Notification {notification_id} not found for this employee",
                details={"notification_id": notification_id}
            )
        return inbox_item(notification, employee_id)

    def mark_all_as_read(self, employee_id: str) -> int:
        """Mark every unread notification of the employee. Returns count updated."""
        return self.repo.mark_all_as_read(employee_id)

    def delete_for_employee(self, notification_id: str, employee_id: str) -> bool:
        """
        Remove the employee from a notification's recipients

        The document itself is deleted once nobody is left on it.

        Returns:
            True if the whole notification was deleted
        """
        notification = self.repo.remove_recipient(notification_id, employee_id)
        if notification is None:
            raise NotificationNotFoundError(
                f"Notification {notification_id} not found for this employee",
                details={"notification_id": notification_id}
            )

        if not notification.recipients:
            self.repo.delete_notification(notification_id)
            logger.info(
                "Deleted notification with no remaining recipients",
                extra={"notification_id": notification_id}
            )
            return True
        return False

    # =========================================================================
    # Rules
    # =========================================================================

    def list_rules(self, event_type: Optional[str] = None) -> List[NotificationRule]:
        """List notification rules"""
        return self.rule_repo.list_rules(event_type)

    def get_rule(self, rule_id: str) -> NotificationRule:
        """Get a rule or raise"""
        rule = self.rule_repo.get_rule(rule_id)
        if rule is None:
            raise NotificationNotFoundError(
                f"Notification rule {rule_id} not found",
                details={"rule_id": rule_id}
            )
        return rule

    def create_rule(
        self,
        event_type: EventType,
        strategy: str = TargetingStrategy.GLOBAL_ROLES.value,
        target_roles: Optional[List[str]] = None,
        department_filter: Optional[str] = None,
        status_filter: Optional[str] = None,
        target_user_ids: Optional[List[str]] = None,
        title: str = "",
        message: str = "",
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        enabled: bool = True
    ) -> NotificationRule:
        """
        Create a notification rule

        Misconfigured targeting is accepted and logged; such rules resolve to
        no recipients at dispatch time.
        """
        if not title and not message:
            raise ValidationError("A notification rule needs a title or message template")

        rule = NotificationRule(
            rule_id=generate_notification_rule_id(),
            event_type=event_type,
            strategy=strategy,
            target_roles=target_roles or [],
            department_filter=department_filter,
            status_filter=status_filter,
            target_user_ids=target_user_ids or [],
            template=NotificationTemplate(title=title, message=message),
            priority=priority,
            enabled=enabled,
            created_at=utc_now()
        )
        self._warn_if_misconfigured(rule)
        return self.rule_repo.create_rule(rule)

    def update_rule(self, rule_id: str, updates: Dict[str, Any]) -> NotificationRule:
        """Apply a partial update to a rule"""
        rule = self.get_rule(rule_id)

        data = rule.model_dump()
        template = dict(data["template"])
        for key in ("title", "message"):
            if key in updates:
                template[key] = updates.pop(key)
        data["template"] = template
        for key, value in updates.items():
            if key in ("rule_id", "created_at"):
                continue
            data[key] = value

        updated = NotificationRule.model_validate(data)
        self._warn_if_misconfigured(updated)
        return self.rule_repo.replace_rule(updated)

    def delete_rule(self, rule_id: str) -> None:
        """Delete a rule or raise"""
        if not self.rule_repo.delete_rule(rule_id):
            raise NotificationNotFoundError(
                f"Notification rule {rule_id} not found",
                details={"rule_id": rule_id}
            )
        logger.info("Deleted notification rule", extra={"rule_id": rule_id})

    def _warn_if_misconfigured(self, rule: NotificationRule) -> None:
        problem = None
        if rule.strategy not in KNOWN_STRATEGIES:
            problem = f"unknown strategy '{rule.strategy}'"
        elif rule.strategy == TargetingStrategy.DEPARTMENT_ALL.value and not rule.department_filter:
            problem = "department_all without a department filter"
        elif rule.strategy == TargetingStrategy.SPECIFIC_USERS.value and not rule.target_user_ids:
            problem = "specific_users without target users"
        elif rule.strategy in (
            TargetingStrategy.GLOBAL_ROLES.value, TargetingStrategy.DEPARTMENT_ROLES.value
        ) and not rule.target_roles:
            problem = f"{rule.strategy} without target roles"

        if problem:
            logger.warning(
                f"Notification rule will not match anyone: {problem}",
                extra={"rule_id": rule.rule_id, "strategy": rule.strategy}
            )

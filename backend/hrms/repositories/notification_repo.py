"""Notification Repository - Notification rules and persisted notifications

Notifications carry a recipients array; read state lives on each recipient
entry, so per-user operations update the matching array element only.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from .mongo_client import get_collection
from ..domain.models import Notification, NotificationRule
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class NotificationRuleRepository:
    """Repository for per-event notification rules"""
    
    COLLECTION_NAME = "notification_rules"
    
    def __init__(self):
        self._rules: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_rule(self, rule: NotificationRule) -> NotificationRule:
        """Create a notification rule"""
        doc = rule.model_dump()
        doc["_id"] = rule.rule_id
        self._rules.insert_one(doc)
        logger.info(
            f"Created notification rule for {rule.event_type}",
            extra={"rule_id": rule.rule_id, "strategy": rule.strategy}
        )
        return rule
    
    def get_rule(self, rule_id: str) -> Optional[NotificationRule]:
        """Get rule by ID"""
        doc = self._rules.find_one({"rule_id": rule_id})
        if doc:
            doc.pop("_id", None)
            return NotificationRule.model_validate(doc)
        return None
    
    def list_rules(self, event_type: Optional[str] = None) -> List[NotificationRule]:
        """List rules, optionally for one event type"""
        query: Dict[str, Any] = {}
        if event_type:
            query["event_type"] = event_type
        rules = []
        for doc in self._rules.find(query).sort("created_at", ASCENDING):
            doc.pop("_id", None)
            rules.append(NotificationRule.model_validate(doc))
        return rules
    
    def find_enabled_rules(self, event_type: str) -> List[NotificationRule]:
        """Enabled rules matching an event type, in creation order"""
        cursor = self._rules.find({"event_type": event_type, "enabled": True}).sort("created_at", ASCENDING)
        rules = []
        for doc in cursor:
            doc.pop("_id", None)
            rules.append(NotificationRule.model_validate(doc))
        return rules
    
    def replace_rule(self, rule: NotificationRule) -> NotificationRule:
        """Overwrite a stored rule"""
        doc = rule.model_dump()
        doc["_id"] = rule.rule_id
        self._rules.replace_one({"rule_id": rule.rule_id}, doc)
        return rule
    
    def delete_rule(self, rule_id: str) -> bool:
        """Delete a rule. Returns True if deleted."""
        result = self._rules.delete_one({"rule_id": rule_id})
        return result.deleted_count > 0


class NotificationRepository:
    """Repository for persisted notifications with per-recipient read state"""
    
    COLLECTION_NAME = "notifications"
    
    def __init__(self):
        self._notifications: Collection = get_collection(self.COLLECTION_NAME)
    
    def create_notification(self, notification: Notification) -> Notification:
        """Persist a notification"""
        doc = notification.model_dump()
        doc["_id"] = notification.notification_id
        self._notifications.insert_one(doc)
        logger.info(
            f"Created notification: {notification.event_type}",
            extra={
                "notification_id": notification.notification_id,
                "recipient_count": len(notification.recipients)
            }
        )
        return notification
    
    def get_notification(self, notification_id: str) -> Optional[Notification]:
        """Get notification by ID"""
        doc = self._notifications.find_one({"notification_id": notification_id})
        if doc:
            doc.pop("_id", None)
            return Notification.model_validate(doc)
        return None
    
    def get_notifications_for_employee(
        self,
        employee_id: str,
        read: Optional[bool] = None,
        skip: int = 0,
        limit: int = 50
    ) -> List[Notification]:
        """Notifications addressed to an employee, newest first"""
        recipient_match: Dict[str, Any] = {"employee_id": employee_id}
        if read is not None:
            recipient_match["read"] = read
        
        cursor = (
            self._notifications.find({"recipients": {"$elemMatch": recipient_match}})
            .sort("created_at", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        notifications = []
        for doc in cursor:
            doc.pop("_id", None)
            notifications.append(Notification.model_validate(doc))
        return notifications
    
    def get_unread_count(self, employee_id: str) -> int:
        """Count notifications the employee has not read"""
        return self._notifications.count_documents({
            "recipients": {"$elemMatch": {"employee_id": employee_id, "read": False}}
        })
    
    def mark_as_read(self, notification_id: str, employee_id: str) -> Optional[Notification]:
        """Mark the employee's recipient entry as read"""
        doc = self._notifications.find_one_and_update(
            {"notification_id": notification_id, "recipients.employee_id": employee_id},
            {"$set": {"recipients.$.read": True, "recipients.$.read_at": utc_now()}},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            return None
        doc.pop("_id", None)
        return Notification.model_validate(doc)
    
    def mark_all_as_read(self, employee_id: str) -> int:
        """Mark every unread entry of the employee as read. Returns count of updated."""
        result = self._notifications.update_many(
            {"recipients": {"$elemMatch": {"employee_id": employee_id, "read": False}}},
            {"$set": {"recipients.$[elem].read": True, "recipients.$[elem].read_at": utc_now()}},
            array_filters=[{"elem.employee_id": employee_id, "elem.read": False}]
        )
        logger.info(
            f"Marked {result.modified_count} notifications as read",
            extra={"employee_id": employee_id}
        )
        return result.modified_count
    
    def remove_recipient(self, notification_id: str, employee_id: str) -> Optional[Notification]:
        """Pull the employee out of the recipients list"""
        doc = self._notifications.find_one_and_update(
            {"notification_id": notification_id, "recipients.employee_id": employee_id},
            {"$pull": {"recipients": {"employee_id": employee_id}}},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            return None
        doc.pop("_id", None)
        return Notification.model_validate(doc)
    
    def delete_notification(self, notification_id: str) -> bool:
        """Delete a notification. Returns True if deleted."""
        result = self._notifications.delete_one({"notification_id": notification_id})
        return result.deleted_count > 0

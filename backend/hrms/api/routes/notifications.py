"""Notifications API - Employee inbox, notification rules and event intake"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from ..deps import get_employee_id_dep, get_event_router, get_notification_service
from ..responses import ok
from ...domain.enums import EventType, NotificationPriority, TargetingStrategy, HierarchyStatus
from ...domain.models import Event
from ...events.router import EventRouter
from ...services.notification_service import NotificationService
from ...utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================

class CreateRuleRequest(BaseModel):
    """Notification rule; title and message are template strings"""
    event_type: EventType
    strategy: str = TargetingStrategy.GLOBAL_ROLES.value
    target_roles: List[str] = Field(default_factory=list)
    department_filter: Optional[str] = None
    status_filter: Optional[HierarchyStatus] = None
    target_user_ids: List[str] = Field(default_factory=list)
    title: str = ""
    message: str = ""
    priority: NotificationPriority = NotificationPriority.MEDIUM
    enabled: bool = True


class UpdateRuleRequest(BaseModel):
    event_type: Optional[EventType] = None
    strategy: Optional[str] = None
    target_roles: Optional[List[str]] = None
    department_filter: Optional[str] = None
    status_filter: Optional[HierarchyStatus] = None
    target_user_ids: Optional[List[str]] = None
    title: Optional[str] = None
    message: Optional[str] = None
    priority: Optional[NotificationPriority] = None
    enabled: Optional[bool] = None


class PublishEventRequest(BaseModel):
    event_type: EventType
    payload: Dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Rules
# =============================================================================

@router.get("/rules")
async def list_rules(
    event_type: Optional[EventType] = Query(None),
    service: NotificationService = Depends(get_notification_service)
):
    """List notification rules, optionally for one event type"""
    rules = service.list_rules(event_type.value if event_type else None)
    return ok(rules, count=len(rules))


@router.post("/rules", status_code=status.HTTP_201_CREATED)
async def create_rule(
    request: CreateRuleRequest,
    service: NotificationService = Depends(get_notification_service)
):
    rule = service.create_rule(**request.model_dump())
    return ok(rule, message="Notification rule created successfully")


@router.put("/rules/{rule_id}")
async def update_rule(
    rule_id: str,
    request: UpdateRuleRequest,
    service: NotificationService = Depends(get_notification_service)
):
    rule = service.update_rule(rule_id, request.model_dump(exclude_unset=True))
    return ok(rule, message="Notification rule updated successfully")


@router.delete("/rules/{rule_id}")
async def delete_rule(
    rule_id: str,
    service: NotificationService = Depends(get_notification_service)
):
    service.delete_rule(rule_id)
    return ok(message="Notification rule deleted successfully")


# =============================================================================
# Events
# =============================================================================

@router.post("/events")
async def publish_event(
    request: PublishEventRequest,
    events: EventRouter = Depends(get_event_router)
):
    """
    Publish a business event right away.

    Every handler registered for the event type runs; a failing handler
    is reported and does not stop the others.
    """
    report = await events.publish(Event(event_type=request.event_type, payload=request.payload))
    return ok(report.model_dump(), message=f"Event {report.event_type} published")


# =============================================================================
# Inbox
# =============================================================================

@router.get("")
async def get_notifications(
    read: Optional[bool] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    employee_id: str = Depends(get_employee_id_dep),
    service: NotificationService = Depends(get_notification_service)
):
    """
    Notifications for the calling employee, newest first.

    - read=false lists only unread items
    - read=true lists only read items
    """
    items = service.get_notifications(employee_id, read=read, skip=skip, limit=limit)
    return ok(items, count=len(items), unread_count=service.get_unread_count(employee_id))


@router.get("/unread-count")
async def get_unread_count(
    employee_id: str = Depends(get_employee_id_dep),
    service: NotificationService = Depends(get_notification_service)
):
    return ok({"unread_count": service.get_unread_count(employee_id)})


@router.post("/read-all")
async def mark_all_as_read(
    employee_id: str = Depends(get_employee_id_dep),
    service: NotificationService = Depends(get_notification_service)
):
    """Mark every notification of the employee as read"""
    marked = service.mark_all_as_read(employee_id)
    logger.info(f"Marked {marked} notifications read", extra={"employee_id": employee_id})
    return ok({"marked_count": marked}, message="All notifications marked as read")


@router.post("/{notification_id}/read")
async def mark_as_read(
    notification_id: str,
    employee_id: str = Depends(get_employee_id_dep),
    service: NotificationService = Depends(get_notification_service)
):
    item = service.mark_as_read(notification_id, employee_id)
    return ok(item, message="Notification marked as read")


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    employee_id: str = Depends(get_employee_id_dep),
    service: NotificationService = Depends(get_notification_service)
):
    """Remove the notification from the employee's inbox"""
    service.delete_for_employee(notification_id, employee_id)
    return ok(message="Notification deleted successfully")

"""Tests for the employee inbox and notification rule management"""

from datetime import timedelta

import pytest

from hrms.domain.errors import NotificationNotFoundError, ValidationError
from hrms.domain.models import Notification, NotificationRecipient
from hrms.services.notification_service import NotificationService
from tests.fakes import NOW


@pytest.fixture
def service(repos):
    return NotificationService(repo=repos.notifications, rule_repo=repos.rules)


@pytest.fixture
def inbox(repos):
    def add(notification_id, recipients, minutes=0):
        repos.notifications.create_notification(Notification(
            notification_id=notification_id,
            event_type="TASK_ASSIGNED",
            title=f"Title {notification_id}",
            message="",
            department="ALL",
            recipients=[NotificationRecipient(employee_id=e, name=e) for e in recipients],
            status="sent",
            created_at=NOW + timedelta(minutes=minutes)
        ))
    add("NTF-1", ["EMP-A", "EMP-B"], minutes=1)
    add("NTF-2", ["EMP-A"], minutes=2)
    add("NTF-3", ["EMP-B"], minutes=3)
    return repos.notifications


class TestInbox:

    def test_newest_first_for_employee(self, service, inbox):
        items = service.get_notifications("EMP-A")
        assert [i["notification_id"] for i in items] == ["NTF-2", "NTF-1"]
        assert all(i["read"] is False for i in items)
        assert "recipients" not in items[0]
        assert items[1]["recipient_count"] == 2

    def test_read_state_is_per_recipient(self, service, inbox):
        item = service.mark_as_read("NTF-1", "EMP-A")
        assert item["read"] is True
        assert item["read_at"] is not None

        assert service.get_unread_count("EMP-A") == 1
        assert service.get_unread_count("EMP-B") == 2
        assert [i["notification_id"] for i in service.get_notifications("EMP-A", read=True)] == ["NTF-1"]
        assert [i["notification_id"] for i in service.get_notifications("EMP-A", read=False)] == ["NTF-2"]

    def test_mark_as_read_for_non_recipient(self, service, inbox):
        with pytest.raises(NotificationNotFoundError):
            service.mark_as_read("NTF-3", "EMP-A")

    def test_mark_all_as_read(self, service, inbox):
        assert service.mark_all_as_read("EMP-B") == 2
        assert service.get_unread_count("EMP-B") == 0
        assert service.get_unread_count("EMP-A") == 2

    def test_delete_keeps_shared_notification(self, service, inbox):
        assert service.delete_for_employee("NTF-1", "EMP-A") is False
        assert [i["notification_id"] for i in service.get_notifications("EMP-A")] == ["NTF-2"]
        assert inbox.get_notification("NTF-1") is not None

    def test_delete_last_recipient_removes_document(self, service, inbox):
        assert service.delete_for_employee("NTF-2", "EMP-A") is True
        assert inbox.get_notification("NTF-2") is None

    def test_delete_unknown(self, service, inbox):
        with pytest.raises(NotificationNotFoundError):
            service.delete_for_employee("NTF-404", "EMP-A")


class TestRules:

    def test_create_and_list(self, service):
        rule = service.create_rule(
            "HR_LEAVE_REQUESTED",
            strategy="department_roles",
            target_roles=["HR Manager"],
            department_filter="HR",
            title="Leave request from {{employee_name}}",
            priority="high"
        )
        assert rule.template.title == "Leave request from {{employee_name}}"
        assert [r.rule_id for r in service.list_rules("HR_LEAVE_REQUESTED")] == [rule.rule_id]
        assert service.list_rules("BIZ_ORDER_CREATED") == []

    def test_requires_template_text(self, service):
        with pytest.raises(ValidationError):
            service.create_rule("HR_LEAVE_REQUESTED", target_roles=["HR Manager"])

    def test_misconfigured_rule_is_accepted(self, service):
        rule = service.create_rule("HR_LEAVE_REQUESTED", strategy="department_all", title="t")
        assert rule.department_filter is None

    def test_update_template_and_fields(self, service):
        rule = service.create_rule("HR_LEAVE_REQUESTED", target_roles=["HR Manager"], title="old", message="m")
        updated = service.update_rule(rule.rule_id, {"title": "new", "enabled": False, "rule_id": "hijack"})
        assert updated.rule_id == rule.rule_id
        assert updated.template.title == "new"
        assert updated.template.message == "m"
        assert updated.enabled is False

    def test_delete(self, service):
        rule = service.create_rule("HR_LEAVE_REQUESTED", target_roles=["HR Manager"], title="t")
        service.delete_rule(rule.rule_id)
        with pytest.raises(NotificationNotFoundError):
            service.get_rule(rule.rule_id)
        with pytest.raises(NotificationNotFoundError):
            service.delete_rule(rule.rule_id)

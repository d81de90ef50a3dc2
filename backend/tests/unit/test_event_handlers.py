"""Tests for the default event-to-notification handlers"""

from datetime import datetime, timedelta, timezone

import pytest

from hrms.domain.enums import EventType
from hrms.domain.models import Event, NotificationRule, NotificationTemplate
from hrms.events import register_default_handlers
from hrms.events.handlers import RULE_DRIVEN_EVENTS, NotificationHandlers
from tests.fakes import NOW


class RecordingDispatcher:
    """Stands in for NotificationDispatcher and records every send"""

    def __init__(self):
        self.calls = []

    def dispatch(self, event_type, payload, now=None):
        self.calls.append(("rules", event_type, payload))
        return []

    def notify_global_role(self, role, event_type, payload):
        self.calls.append(("global_role", role, payload))

    def notify_department_role(self, role, department, event_type, payload):
        self.calls.append(("department_role", role, department, payload))

    def notify_department(self, department, event_type, payload):
        self.calls.append(("department", department, payload))

    def notify_employee(self, employee_id, event_type, payload):
        self.calls.append(("employee", employee_id, payload))


@pytest.fixture
def recorder():
    return RecordingDispatcher()


@pytest.fixture
def handlers(recorder):
    return NotificationHandlers(recorder)


def event(event_type, **payload):
    return Event(event_type=event_type, payload=payload)


class TestRegistration:

    def test_every_event_type_has_a_handler(self, event_router, recorder):
        register_default_handlers(event_router, recorder)
        for event_type in EventType:
            assert event_router.handlers_for(event_type), event_type

    def test_rule_driven_events_go_to_dispatch(self, event_router, recorder):
        register_default_handlers(event_router, recorder)
        for event_type in RULE_DRIVEN_EVENTS:
            assert len(event_router.handlers_for(event_type)) == 1

    def test_registration_does_not_build_dispatcher(self, event_router):
        handlers = NotificationHandlers()
        handlers.register(event_router)
        assert handlers._dispatcher is None


class TestFinanceHandlers:

    def test_salary_processed_notifies_finance_and_employee(self, handlers, recorder):
        handlers.salary_processed(event(
            EventType.FINANCE_SALARY_PROCESSED,
            employee_id="EMP-A", month="June", year=2024, net_salary=61250
        ))
        kinds = [c[0] for c in recorder.calls]
        assert kinds == ["department", "employee"]
        assert recorder.calls[0][1] == "Finance"
        personal = recorder.calls[1][2]
        assert personal["title"] == "Your Salary Has Been Processed"
        assert personal["message"] == "Your salary for June 2024 has been processed. Net amount: 61250"

    def test_salary_paid_is_high_priority(self, handlers, recorder):
        handlers.salary_paid(event(EventType.FINANCE_SALARY_PAID, employee_id="EMP-A", month="May", year=2024))
        [(kind, employee_id, payload)] = recorder.calls
        assert (kind, employee_id) == ("employee", "EMP-A")
        assert payload["priority"] == "high"

    def test_salary_pending_goes_to_finance_manager_and_accountant(self, handlers, recorder):
        handlers.salary_pending(event(EventType.FINANCE_SALARY_PENDING))
        assert [(c[1], c[2]) for c in recorder.calls] == [
            ("Finance Manager", "Finance"), ("Accountant", "Finance")
        ]

    def test_budget_exceeded(self, handlers, recorder):
        handlers.budget_exceeded(event(EventType.FINANCE_BUDGET_EXCEEDED))
        assert [c[:2] for c in recorder.calls] == [
            ("department_role", "Finance Manager"), ("global_role", "Department Head")
        ]


class TestHrHandlers:

    def test_onboarding_welcomes_employee(self, handlers, recorder):
        handlers.employee_onboarded(event(EventType.HR_EMPLOYEE_ONBOARDED, employee_id="EMP-N"))
        assert [c[:2] for c in recorder.calls] == [("department", "HR"), ("employee", "EMP-N")]
        assert recorder.calls[1][2]["title"] == "Welcome to the Team!"

    def test_role_assigned_message(self, handlers, recorder):
        handlers.role_assigned(event(EventType.HR_ROLE_ASSIGNED, employee_id="EMP-A", role_name="Accountant"))
        assert recorder.calls[0][2]["message"] == "You have been assigned the role of Accountant"
        assert recorder.calls[1][:2] == ("department", "HR")

    def test_leave_rejected_includes_reason(self, handlers, recorder):
        handlers.leave_rejected(event(
            EventType.HR_LEAVE_REJECTED,
            employee_id="EMP-A", start_date="2024-07-01", end_date="2024-07-05", reason="Peak season."
        ))
        assert recorder.calls[0][2]["message"] == (
            "Your leave request from 2024-07-01 to 2024-07-05 was not approved. Peak season."
        )

    def test_leave_without_employee_sends_nothing(self, handlers, recorder):
        handlers.leave_approved(event(EventType.HR_LEAVE_APPROVED))
        assert recorder.calls == []

    def test_contract_expiring(self, handlers, recorder):
        handlers.contract_expiring(event(EventType.HR_CONTRACT_EXPIRING, employee_id="EMP-A", days_remaining=30))
        assert recorder.calls[0][:3] == ("department_role", "HR Manager", "HR")
        assert recorder.calls[1][2]["message"] == "Your contract expires in 30 days. Please contact HR."

    def test_contract_days_from_expiry_date(self, handlers, recorder):
        expiry = (datetime.now(timezone.utc).date() + timedelta(days=10)).isoformat()
        handlers.contract_expiring(event(EventType.HR_CONTRACT_EXPIRING, employee_id="EMP-A", expiry_date=expiry))
        assert recorder.calls[0][3]["days_remaining"] == 10
        assert recorder.calls[1][2]["message"] == "Your contract expires in 10 days. Please contact HR."

    def test_contract_with_bad_expiry_date(self, handlers, recorder):
        handlers.contract_expiring(event(EventType.HR_CONTRACT_EXPIRING, expiry_date="next spring"))
        assert "days_remaining" not in recorder.calls[0][3]

    @pytest.mark.parametrize("department", [None, "ALL", "all"])
    def test_birthday_skipped_without_real_department(self, handlers, recorder, department):
        handlers.birthday_reminder(event(EventType.HR_BIRTHDAY_REMINDER, department_code=department))
        assert recorder.calls == []

    def test_birthday_goes_to_department(self, handlers, recorder):
        handlers.birthday_reminder(event(EventType.HR_BIRTHDAY_REMINDER, department_code="Finance"))
        assert recorder.calls[0][:2] == ("department", "Finance")


class TestCrossDepartmentHandlers:

    def test_maintenance_reaches_three_departments(self, handlers, recorder):
        handlers.system_maintenance(event(EventType.SYSTEM_MAINTENANCE))
        assert [c[1] for c in recorder.calls] == ["HR", "Finance", "BusinessOperation"]

    def test_system_alert_is_critical_for_executives(self, handlers, recorder):
        handlers.system_alert(event(EventType.SYSTEM_ALERT, message="Disk full"))
        [(kind, role, payload)] = recorder.calls
        assert (kind, role) == ("global_role", "Executive")
        assert payload["priority"] == "critical"
        assert payload["message"] == "Disk full"

    @pytest.mark.parametrize("days,priority", [(0, "critical"), (1, "critical"), (2, "high"), (None, "high")])
    def test_deadline_priority(self, handlers, recorder, days, priority):
        handlers.deadline_approaching(event(
            EventType.DEADLINE_APPROACHING, assigned_to="EMP-A", task_title="Audit", days_remaining=days
        ))
        assert recorder.calls[0][2]["priority"] == priority

    def test_task_assigned_needs_assignee(self, handlers, recorder):
        handlers.task_assigned(event(EventType.TASK_ASSIGNED, task_title="Audit"))
        assert recorder.calls == []


class TestEndToEnd:

    @pytest.mark.anyio
    async def test_salary_processed_persists_notifications(self, event_router, dispatcher, repos, seed):
        seed.role("ROLE-ACC", "Accountant")
        seed.employee("EMP-A", "Aisha", "Finance")
        seed.employee("EMP-B", "Bilal", "Finance")
        seed.assignment("EMP-B", "ROLE-ACC", "Finance")
        register_default_handlers(event_router, dispatcher)

        event_router.emit(EventType.FINANCE_SALARY_PROCESSED, {
            "employee_id": "EMP-A", "month": "June", "year": 2024, "net_salary": 100
        })
        await event_router.drain()

        stored = sorted(repos.notifications.notifications.values(), key=lambda n: n.title)
        assert [n.title for n in stored] == ["Finance Salary Processed", "Your Salary Has Been Processed"]
        assert [r.employee_id for r in stored[0].recipients] == ["EMP-B"]
        assert [r.employee_id for r in stored[1].recipients] == ["EMP-A"]

    @pytest.mark.anyio
    async def test_rule_driven_event_uses_rules(self, event_router, dispatcher, repos, seed):
        seed.employee("EMP-A", "Aisha")
        repos.rules.create_rule(NotificationRule(
            rule_id="NR-1",
            event_type=EventType.BIZ_ORDER_CREATED,
            strategy="specific_users",
            target_user_ids=["EMP-A"],
            template=NotificationTemplate(title="Order {{order_id}}"),
            created_at=NOW
        ))
        register_default_handlers(event_router, dispatcher)

        event_router.emit(EventType.BIZ_ORDER_CREATED, {"order_id": 42})
        await event_router.drain()

        [notification] = repos.notifications.notifications.values()
        assert notification.title == "Order 42"
        assert notification.department == "BusinessOperation"

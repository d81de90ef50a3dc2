"""Tests for salary breakup files"""

from datetime import datetime, timezone

import pytest

from hrms.domain.errors import (
    BreakupFileNotFoundError, EmployeeNotFoundError, RoleNotFoundError,
    SalaryAlreadyPaidError, SalaryAlreadyProcessingError, ValidationError
)
from hrms.domain.models import SalaryComponent, SalaryRules
from hrms.services.salary_service import SalaryService


RULES = SalaryRules(
    base_salary=40000,
    allowances=[SalaryComponent(name="House Rent", type="percentage", value=10)],
    deductions=[SalaryComponent(name="Tax", type="fixed", value=1500)],
)


@pytest.fixture
def service(repos, seed, event_router):
    seed.employee("EMP-A", "Aisha", "Finance")
    seed.role("ROLE-ACC", "Accountant", salary_rules=RULES)
    seed.role("ROLE-BARE", "Intern")
    return SalaryService(
        repo=repos.salaries,
        role_repo=repos.roles,
        employee_repo=repos.employees,
        events=event_router
    )


class TestCreateBreakupFile:

    def test_uses_role_rules(self, service):
        breakup = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        assert breakup.calculated_breakup.net_salary == 40000 + 4000 - 1500
        assert breakup.paid_at is None
        assert breakup.salary_rules.base_salary == 40000

    def test_supplied_rules_override_role(self, service):
        rules = SalaryRules(base_salary=1000)
        breakup = service.create_breakup_file("EMP-A", "ROLE-BARE", "June", 2024, salary_rules=rules)
        assert breakup.calculated_breakup.net_salary == 1000

    def test_role_without_rules_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create_breakup_file("EMP-A", "ROLE-BARE", "June", 2024)

    def test_emits_salary_processed(self, service, event_router):
        breakup = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        assert event_router.pending == 1
        queued = event_router._queue[0]
        assert queued.event_type == "FINANCE_SALARY_PROCESSED"
        assert queued.payload["breakup_id"] == breakup.breakup_id
        assert queued.payload["net_salary"] == 42500
        assert queued.payload["employee_name"] == "Aisha"

    def test_duplicate_while_unpaid(self, service):
        service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        with pytest.raises(SalaryAlreadyProcessingError) as exc:
            service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        assert exc.value.message == "Salary for June 2024 is already being processed"

    def test_duplicate_after_payment(self, service):
        breakup = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        service.mark_paid(breakup.breakup_id)
        with pytest.raises(SalaryAlreadyPaidError) as exc:
            service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        assert exc.value.message == "Salary for June 2024 has already been paid"

    def test_duplicate_messages_differ(self, service):
        first = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        with pytest.raises(SalaryAlreadyProcessingError) as processing:
            service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        service.mark_paid(first.breakup_id)
        with pytest.raises(SalaryAlreadyPaidError) as paid:
            service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        assert processing.value.message != paid.value.message
        assert processing.value.http_status == paid.value.http_status == 400

    def test_other_period_allowed(self, service):
        service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        service.create_breakup_file("EMP-A", "ROLE-ACC", "July", 2024)
        assert len(service.get_salary_history("EMP-A")) == 2

    def test_unknown_employee(self, service):
        with pytest.raises(EmployeeNotFoundError):
            service.create_breakup_file("EMP-NOPE", "ROLE-ACC", "June", 2024)

    def test_unknown_role(self, service):
        with pytest.raises(RoleNotFoundError):
            service.create_breakup_file("EMP-A", "ROLE-NOPE", "June", 2024)

    def test_blank_month(self, service):
        with pytest.raises(ValidationError):
            service.create_breakup_file("EMP-A", "ROLE-ACC", "  ", 2024)


class TestMarkPaid:

    def test_records_payment_fields(self, service, event_router):
        breakup = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        paid_at = datetime(2024, 7, 1, 15, 7, 45, tzinfo=timezone.utc)

        paid = service.mark_paid(breakup.breakup_id, paid_at=paid_at)

        assert paid.paid_at == paid_at
        assert paid.paid_month == "July"
        assert paid.paid_year == 2024
        assert paid.paid_time == "3:07:45 PM"
        assert event_router._queue[-1].event_type == "FINANCE_SALARY_PAID"

    def test_cannot_pay_twice(self, service):
        breakup = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        service.mark_paid(breakup.breakup_id)
        with pytest.raises(SalaryAlreadyPaidError):
            service.mark_paid(breakup.breakup_id)

    def test_unknown_breakup(self, service):
        with pytest.raises(BreakupFileNotFoundError):
            service.mark_paid("SAL-NOPE")


class TestQueries:

    def test_latest_and_missing(self, service):
        with pytest.raises(BreakupFileNotFoundError):
            service.get_latest_breakup("EMP-A")
        breakup = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        assert service.get_latest_breakup("EMP-A").breakup_id == breakup.breakup_id

    def test_list_paid_filter(self, service):
        june = service.create_breakup_file("EMP-A", "ROLE-ACC", "June", 2024)
        service.create_breakup_file("EMP-A", "ROLE-ACC", "July", 2024)
        service.mark_paid(june.breakup_id)
        assert [b.month for b in service.list_breakups(paid=True)] == ["June"]
        assert [b.month for b in service.list_breakups(paid=False)] == ["July"]
        assert [b.month for b in service.list_breakups(month="July", year=2024)] == ["July"]


class TestRoleSalaryRules:

    def test_lookup_by_id_or_name(self, service):
        assert service.get_role_salary_rules("ROLE-ACC").salary_rules.base_salary == 40000
        assert service.get_role_salary_rules("Accountant").role_id == "ROLE-ACC"

    def test_update(self, service):
        role = service.update_role_salary_rules("ROLE-BARE", SalaryRules(base_salary=900))
        assert role.salary_rules.base_salary == 900

    def test_update_unknown_role(self, service):
        with pytest.raises(RoleNotFoundError):
            service.update_role_salary_rules("ROLE-NOPE", SalaryRules(base_salary=900))

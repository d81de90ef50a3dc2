"""Tests for org unit management"""

import pytest

from hrms.domain.errors import OrgUnitHasChildrenError, OrgUnitNotFoundError, ValidationError
from hrms.services.org_unit_service import OrgUnitService, slugify, status_for_level


@pytest.fixture
def service(repos):
    return OrgUnitService(
        repo=repos.org_units,
        assignment_repo=repos.assignments,
        employee_repo=repos.employees
    )


class TestHelpers:

    @pytest.mark.parametrize("level,status", [
        (0, "Offices"), (1, "Groups"), (2, "Divisions"), (3, "Departments"),
        (4, "Branches"), (5, "Cells"), (6, "Desks"), (12, "Desks"),
    ])
    def test_status_for_level(self, level, status):
        assert status_for_level(level) == status

    def test_slugify(self):
        assert slugify("Karachi  Office / North") == "karachi-office-north"


class TestCreate:

    def test_root_unit(self, service):
        unit = service.create_org_unit("Head Office", "HR")
        assert unit.level == 0
        assert unit.status == "Offices"
        assert unit.parent_id is None
        assert unit.path == "head-office"

    def test_child_derives_level_status_and_path(self, service):
        root = service.create_org_unit("Head Office", "Finance")
        group = service.create_org_unit("Payroll Group", "Finance", parent_id=root.org_unit_id)
        assert group.level == 1
        assert group.status == "Groups"
        assert group.path == "head-office.payroll-group"

    def test_unknown_parent(self, service):
        with pytest.raises(OrgUnitNotFoundError):
            service.create_org_unit("Orphan", "HR", parent_id="OU-NOPE")

    def test_blank_name(self, service):
        with pytest.raises(ValidationError):
            service.create_org_unit("   ", "HR")


class TestTree:

    def test_nested_tree(self, service):
        root = service.create_org_unit("Head Office", "HR")
        service.create_org_unit("East", "HR", parent_id=root.org_unit_id)
        service.create_org_unit("West", "HR", parent_id=root.org_unit_id)

        [node] = service.get_tree()
        assert node["name"] == "Head Office"
        assert sorted(c["name"] for c in node["children"]) == ["East", "West"]

    def test_department_filter(self, service):
        service.create_org_unit("People", "HR")
        service.create_org_unit("Money", "Finance")
        assert [n["name"] for n in service.get_tree("Finance")] == ["Money"]

    def test_department_filter_keeps_units_under_other_departments(self, service):
        root = service.create_org_unit("Head Office", "All")
        division = service.create_org_unit("HR Division", "HR", parent_id=root.org_unit_id)
        service.create_org_unit("Recruiting", "HR", parent_id=division.org_unit_id)
        service.create_org_unit("Treasury", "Finance", parent_id=root.org_unit_id)

        tree = service.get_tree("HR")
        assert [n["name"] for n in tree] == ["HR Division"]
        assert tree[0]["parent_id"] == root.org_unit_id
        assert [c["name"] for c in tree[0]["children"]] == ["Recruiting"]

    def test_unfiltered_tree_has_single_root(self, service):
        root = service.create_org_unit("Head Office", "All")
        service.create_org_unit("HR Division", "HR", parent_id=root.org_unit_id)
        assert [n["name"] for n in service.get_tree()] == ["Head Office"]


class TestDelete:

    def test_refuses_with_children(self, service):
        root = service.create_org_unit("Head Office", "HR")
        service.create_org_unit("East", "HR", parent_id=root.org_unit_id)
        with pytest.raises(OrgUnitHasChildrenError) as exc:
            service.delete_org_unit(root.org_unit_id)
        assert exc.value.message == "Cannot delete org unit with 1 children. Delete children first."

    def test_refuses_with_active_assignments(self, service, seed):
        unit = service.create_org_unit("Desk", "HR")
        seed.role("ROLE-X")
        seed.employee("EMP-A")
        seed.assignment("EMP-A", "ROLE-X", "HR", org_unit_id=unit.org_unit_id)
        with pytest.raises(ValidationError):
            service.delete_org_unit(unit.org_unit_id)

    def test_deletes_leaf(self, service):
        unit = service.create_org_unit("Desk", "HR")
        service.delete_org_unit(unit.org_unit_id)
        with pytest.raises(OrgUnitNotFoundError):
            service.get_org_unit(unit.org_unit_id)


class TestEmployees:

    def test_includes_descendant_units(self, service, seed):
        root = service.create_org_unit("Head Office", "HR")
        child = service.create_org_unit("East", "HR", parent_id=root.org_unit_id)
        other = service.create_org_unit("Elsewhere", "HR")
        seed.role("ROLE-X")
        seed.employee("EMP-A", "Aisha")
        seed.employee("EMP-B", "Bilal")
        seed.employee("EMP-C", "Chen")
        seed.assignment("EMP-A", "ROLE-X", "HR", org_unit_id=root.org_unit_id)
        seed.assignment("EMP-B", "ROLE-X", "HR", org_unit_id=child.org_unit_id)
        seed.assignment("EMP-C", "ROLE-X", "HR", org_unit_id=other.org_unit_id)

        people = service.get_employees(root.org_unit_id)

        assert sorted(p["employee_id"] for p in people) == ["EMP-A", "EMP-B"]
        assert {p["role_id"] for p in people} == {"ROLE-X"}

    def test_unknown_unit(self, service):
        with pytest.raises(OrgUnitNotFoundError):
            service.get_employees("OU-NOPE")

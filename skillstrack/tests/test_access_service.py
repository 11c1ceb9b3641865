"""
Tests for the access resolver
"""
from types import MappingProxyType

import pytest
from skillstrack.core import permissions
from skillstrack.core.exceptions import AccessDeniedError, EmployeeNotFoundError, UnknownRoleError
from skillstrack.core.permissions import Role
from skillstrack.models.manager_department import ManagerDepartment
from skillstrack.services.access_service import (
    can_access_employee,
    can_assign_to_department,
    ensure_department_assignment,
    ensure_employee_access,
)
from skillstrack.services.org_graph import OrgGraphAccessor
from skillstrack.tests.helpers import assign


class FakeOrg:
    """In-memory organizational graph"""

    def __init__(self, departments=None, managers=None, links=None):
        self.departments = departments or {}
        self.managers = managers or {}
        self.links = links or {}

    def department_of(self, employee_id):
        if employee_id not in self.departments:
            raise EmployeeNotFoundError(employee_id)
        return self.departments[employee_id]

    def managers_of(self, department_id):
        return set(self.managers.get(department_id, ()))

    def employee_for_user(self, user_id):
        return self.links.get(user_id)


@pytest.fixture
def org():
    # employee 1 in dept 10, employee 2 in dept 20, employee 3 unassigned
    return FakeOrg(
        departments={1: 10, 2: 20, 3: None},
        managers={10: {100}, 20: {200}},
        links={300: 1, 301: 3},
    )


def test_admin_can_access_every_employee(org):
    for employee_id in (1, 2, 3):
        assert can_access_employee(org, 999, Role.ADMIN, employee_id)


def test_admin_allowed_without_existence_check(org):
    assert can_access_employee(org, 999, Role.ADMIN, 12345)


def test_manager_scoped_to_managed_departments(org):
    assert can_access_employee(org, 100, Role.DEPARTMENT_MANAGER, 1)
    assert not can_access_employee(org, 100, Role.DEPARTMENT_MANAGER, 2)
    assert can_access_employee(org, 200, Role.DEPARTMENT_MANAGER, 2)


def test_unassigned_employee_fails_closed(org):
    assert not can_access_employee(org, 100, Role.DEPARTMENT_MANAGER, 3)
    # Even the user linked to the unassigned employee
    assert not can_access_employee(org, 301, Role.USER, 3)


@pytest.mark.parametrize("role", [Role.FIRE_WARDEN, Role.EMPLOYEE_VIEWER, Role.USER])
def test_self_only_roles(org, role):
    assert can_access_employee(org, 300, role, 1)
    assert not can_access_employee(org, 300, role, 2)
    assert not can_access_employee(org, 999, role, 1)


def test_missing_employee_is_not_a_denial(org):
    with pytest.raises(EmployeeNotFoundError):
        can_access_employee(org, 100, Role.DEPARTMENT_MANAGER, 404)
    with pytest.raises(EmployeeNotFoundError):
        can_access_employee(org, 300, Role.USER, 404)


def test_unknown_role_is_never_a_grant(org):
    with pytest.raises(UnknownRoleError):
        can_access_employee(org, 100, "Admin", 1)


def test_role_without_explicit_grant_is_denied(org, monkeypatch):
    table = dict(permissions.ROLE_CAPABILITIES)
    del table[Role.FIRE_WARDEN]
    monkeypatch.setattr(permissions, "ROLE_CAPABILITIES", MappingProxyType(table))

    assert not can_access_employee(org, 300, Role.FIRE_WARDEN, 1)


def test_ensure_employee_access_raises_access_denied(org):
    ensure_employee_access(org, 100, Role.DEPARTMENT_MANAGER, 1)
    with pytest.raises(AccessDeniedError):
        ensure_employee_access(org, 100, Role.DEPARTMENT_MANAGER, 2)


def test_repeated_calls_are_idempotent(org):
    results = {can_access_employee(org, 100, Role.DEPARTMENT_MANAGER, 1) for _ in range(5)}
    assert results == {True}


def test_assignment_change_applies_on_next_call(db, manager, logistics, quality, make_employee):
    employee = make_employee(department=logistics)
    org = OrgGraphAccessor(db)

    assert not can_access_employee(org, manager.id, Role.DEPARTMENT_MANAGER, employee.id)

    assign(db, manager, logistics)
    assert can_access_employee(org, manager.id, Role.DEPARTMENT_MANAGER, employee.id)

    db.query(ManagerDepartment).filter(ManagerDepartment.manager_id == manager.id).delete()
    db.commit()
    assert not can_access_employee(org, manager.id, Role.DEPARTMENT_MANAGER, employee.id)

    # Moving the employee moves the decision with it
    assign(db, manager, quality)
    employee.department_id = quality.id
    db.commit()
    assert can_access_employee(org, manager.id, Role.DEPARTMENT_MANAGER, employee.id)


def test_org_graph_accessor_queries(db, manager, logistics, make_employee, make_user):
    employee = make_employee(department=logistics)
    unassigned = make_employee(first_name="Una")
    linked = make_user(Role.USER, employee=employee)
    assign(db, manager, logistics)

    org = OrgGraphAccessor(db)
    assert org.department_of(employee.id) == logistics.id
    assert org.department_of(unassigned.id) is None
    assert org.managers_of(logistics.id) == {manager.id}
    assert org.employee_for_user(linked.id) == employee.id
    assert org.employee_for_user(manager.id) is None
    assert org.managed_department_ids(manager.id) == {logistics.id}
    with pytest.raises(EmployeeNotFoundError):
        org.department_of(9999)


def test_department_assignment_targets(org):
    assert can_assign_to_department(org, 999, Role.ADMIN, 20)
    assert can_assign_to_department(org, 999, Role.ADMIN, None)
    assert can_assign_to_department(org, 100, Role.DEPARTMENT_MANAGER, 10)
    assert not can_assign_to_department(org, 100, Role.DEPARTMENT_MANAGER, 20)
    assert not can_assign_to_department(org, 100, Role.DEPARTMENT_MANAGER, None)
    assert not can_assign_to_department(org, 300, Role.USER, 10)

    with pytest.raises(AccessDeniedError):
        ensure_department_assignment(org, 100, Role.DEPARTMENT_MANAGER, 20)

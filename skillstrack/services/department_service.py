"""
Department service - business logic for department management
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from skillstrack.core.exceptions import DomainValidationError, ResourceNotFoundError
from skillstrack.core.permissions import Capability, has_capability
from skillstrack.models.department import Department
from skillstrack.models.employee import Employee
from skillstrack.models.history import EntityKind, HistoryAction
from skillstrack.models.manager_department import ManagerDepartment
from skillstrack.models.user import User
from skillstrack.schemas.department import DepartmentCreate, DepartmentUpdate
from skillstrack.schemas.history import HistoryEntry
from skillstrack.services.history_service import commit_mutation, record_history
from skillstrack.utils.json_serializer import model_snapshot


def department_snapshot(department: Department) -> dict:
    """Department columns plus its manager ids"""
    snapshot = model_snapshot(department, exclude=("created_at", "updated_at"))
    snapshot["manager_ids"] = department.manager_ids
    return snapshot


def validate_manager_ids(db: Session, manager_ids: List[int]) -> List[User]:
    """
    Check that every id names an active user allowed to manage departments

    Raises:
        DomainValidationError: If any id is unknown or lacks department.manage
    """
    unique_ids = sorted(set(manager_ids))
    users = db.query(User).filter(User.id.in_(unique_ids)).all() if unique_ids else []
    missing = set(unique_ids) - {u.id for u in users}
    if missing:
        raise DomainValidationError(
            f"Users not found: {sorted(missing)}", {"user_ids": sorted(missing)}
        )
    not_managers = [u.id for u in users if not has_capability(u.role, Capability.DEPARTMENT_MANAGE)]
    if not_managers:
        raise DomainValidationError(
            f"Users cannot manage departments: {not_managers}", {"user_ids": not_managers}
        )
    return users


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Department).filter(func.lower(Department.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(Department.id != exclude_id)
    if query.first():
        raise DomainValidationError(f"Department with name '{name}' already exists")


def get_department(db: Session, department_id: int) -> Optional[Department]:
    """Get a department by ID"""
    return db.query(Department).filter(Department.id == department_id).first()


def list_departments(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    active_only: Optional[bool] = None
) -> List[Department]:
    """List departments with optional filtering"""
    query = db.query(Department)
    if active_only is not None:
        query = query.filter(Department.active == active_only)
    return query.order_by(Department.name).offset(skip).limit(limit).all()


def create_department(
    db: Session,
    department_data: DepartmentCreate,
    actor_id: int
) -> Department:
    """
    Create a new department, optionally with its initial managers

    Args:
        db: Database session
        department_data: Department creation data
        actor_id: ID of the user creating the department

    Returns:
        Created Department instance

    Raises:
        DomainValidationError: Duplicate name or invalid manager ids
        StoreError: Department and its history entry could not be committed
    """
    _ensure_unique_name(db, department_data.name)
    managers = validate_manager_ids(db, department_data.manager_ids)

    department = Department(
        name=department_data.name,
        active=department_data.active
    )
    for manager in managers:
        department.manager_assignments.append(ManagerDepartment(manager_id=manager.id))
    db.add(department)
    db.flush()

    record_history(db, HistoryEntry(
        table_name=EntityKind.DEPARTMENT,
        record_id=department.id,
        action=HistoryAction.CREATE,
        new_values=department_snapshot(department),
        actor_id=actor_id,
    ), commit=False)
    commit_mutation(db, "create department")
    db.refresh(department)
    return department


def update_department(
    db: Session,
    department_id: int,
    department_data: DepartmentUpdate,
    actor_id: int
) -> Department:
    """
    Update a department

    Raises:
        ResourceNotFoundError: Department does not exist
        DomainValidationError: Name conflict
        StoreError: Commit failed
    """
    department = get_department(db, department_id)
    if not department:
        raise ResourceNotFoundError("Department", department_id)

    old_values = department_snapshot(department)

    if department_data.name is not None:
        _ensure_unique_name(db, department_data.name, exclude_id=department_id)
        department.name = department_data.name

    if department_data.active is not None:
        department.active = department_data.active

    db.flush()
    record_history(db, HistoryEntry(
        table_name=EntityKind.DEPARTMENT,
        record_id=department.id,
        action=HistoryAction.UPDATE,
        old_values=old_values,
        new_values=department_snapshot(department),
        actor_id=actor_id,
    ), commit=False)
    commit_mutation(db, "update department")
    db.refresh(department)
    return department


def delete_department(db: Session, department_id: int, actor_id: int) -> None:
    """
    Delete a department

    Employees in it become unassigned and its manager assignments are
    removed; both are part of the same commit as the history entry.

    Raises:
        ResourceNotFoundError: Department does not exist
        StoreError: Commit failed
    """
    department = get_department(db, department_id)
    if not department:
        raise ResourceNotFoundError("Department", department_id)

    old_values = department_snapshot(department)
    employees = db.query(Employee).filter(Employee.department_id == department_id).all()
    old_values["employee_ids"] = [e.id for e in employees]

    for employee in employees:
        employee_before = model_snapshot(employee, exclude=("created_at", "updated_at"))
        employee.department_id = None
        record_history(db, HistoryEntry(
            table_name=EntityKind.EMPLOYEE,
            record_id=employee.id,
            action=HistoryAction.UPDATE,
            old_values=employee_before,
            new_values={**employee_before, "department_id": None},
            actor_id=actor_id,
        ), commit=False)

    db.flush()
    db.delete(department)
    record_history(db, HistoryEntry(
        table_name=EntityKind.DEPARTMENT,
        record_id=department_id,
        action=HistoryAction.DELETE,
        old_values=old_values,
        actor_id=actor_id,
    ), commit=False)
    commit_mutation(db, "delete department")

"""
Manager-Department service - business logic for manager-department assignments

Assignment changes are recorded as Department UPDATE history entries carrying
the department's manager ids before and after.
"""
from sqlalchemy.orm import Session
from typing import List
from skillstrack.core.exceptions import DomainValidationError, ResourceNotFoundError
from skillstrack.models.department import Department
from skillstrack.models.history import EntityKind, HistoryAction
from skillstrack.models.manager_department import ManagerDepartment
from skillstrack.schemas.history import HistoryEntry
from skillstrack.services.department_service import validate_manager_ids
from skillstrack.services.history_service import commit_mutation, record_history


def record_manager_change(
    db: Session,
    department_id: int,
    before: List[int],
    after: List[int],
    actor_id: int
) -> None:
    """Department UPDATE entry carrying manager ids before and after"""
    record_history(db, HistoryEntry(
        table_name=EntityKind.DEPARTMENT,
        record_id=department_id,
        action=HistoryAction.UPDATE,
        old_values={"id": department_id, "manager_ids": before},
        new_values={"id": department_id, "manager_ids": after},
        actor_id=actor_id,
    ), commit=False)


def department_manager_ids(db: Session, department_id: int) -> List[int]:
    """Sorted user ids of a department's managers"""
    rows = db.query(ManagerDepartment.manager_id).filter(
        ManagerDepartment.department_id == department_id
    ).all()
    return sorted(r.manager_id for r in rows)


def assign_departments_to_manager(
    db: Session,
    manager_id: int,
    department_ids: List[int],
    actor_id: int
) -> List[ManagerDepartment]:
    """
    Replace the set of departments a manager manages

    Args:
        db: Database session
        manager_id: User id of the manager
        department_ids: Departments to assign
        actor_id: ID of the user performing the assignment

    Returns:
        The manager's assignments after the change

    Raises:
        DomainValidationError: Manager invalid, or departments missing/inactive
        StoreError: Commit failed
    """
    validate_manager_ids(db, [manager_id])

    requested = set(department_ids)
    departments = db.query(Department).filter(Department.id.in_(requested)).all() if requested else []
    missing_ids = requested - {d.id for d in departments}
    if missing_ids:
        raise DomainValidationError(f"Departments not found: {sorted(missing_ids)}")

    inactive_departments = [d.id for d in departments if not d.active]
    if inactive_departments:
        raise DomainValidationError(f"Cannot assign inactive departments: {inactive_departments}")

    current = {
        a.department_id: a
        for a in db.query(ManagerDepartment).filter(ManagerDepartment.manager_id == manager_id)
    }
    touched = sorted(requested.symmetric_difference(current))
    before = {dept_id: department_manager_ids(db, dept_id) for dept_id in touched}

    for dept_id, assignment in current.items():
        if dept_id not in requested:
            db.delete(assignment)
    for dept_id in requested - set(current):
        db.add(ManagerDepartment(manager_id=manager_id, department_id=dept_id))
    db.flush()

    for dept_id in touched:
        record_manager_change(db, dept_id, before[dept_id], department_manager_ids(db, dept_id), actor_id)
    commit_mutation(db, "assign manager departments")

    return list_manager_departments(db, manager_id)


def list_manager_departments(
    db: Session,
    manager_id: int
) -> List[ManagerDepartment]:
    """List all departments assigned to a manager"""
    return db.query(ManagerDepartment).filter(
        ManagerDepartment.manager_id == manager_id
    ).order_by(ManagerDepartment.department_id).all()


def remove_department_from_manager(
    db: Session,
    manager_id: int,
    department_id: int,
    actor_id: int
) -> None:
    """
    Remove a department assignment from a manager

    Raises:
        ResourceNotFoundError: Assignment not found
        StoreError: Commit failed
    """
    assignment = db.query(ManagerDepartment).filter(
        ManagerDepartment.manager_id == manager_id,
        ManagerDepartment.department_id == department_id
    ).first()

    if not assignment:
        raise ResourceNotFoundError("Assignment", f"{manager_id}/{department_id}")

    before = department_manager_ids(db, department_id)
    db.delete(assignment)
    db.flush()
    record_manager_change(db, department_id, before, department_manager_ids(db, department_id), actor_id)
    commit_mutation(db, "remove manager department")

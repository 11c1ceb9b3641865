"""
Employee service - business logic for employee management
"""
import logging
from sqlalchemy.orm import Session
from typing import Optional
from skillstrack.core.exceptions import DomainValidationError, EmployeeNotFoundError
from skillstrack.models.department import Department
from skillstrack.models.employee import Employee
from skillstrack.models.history import EntityKind, HistoryAction
from skillstrack.models.location import Location
from skillstrack.models.ticket_record import TicketRecord
from skillstrack.models.training_record import TrainingRecord
from skillstrack.models.user import User
from skillstrack.schemas.employee import EmployeeCreate, EmployeeUpdate
from skillstrack.schemas.history import HistoryEntry
from skillstrack.services.history_service import commit_mutation, record_history
from skillstrack.utils.json_serializer import model_snapshot

logger = logging.getLogger(__name__)

_SNAPSHOT_EXCLUDE = ("created_at", "updated_at")


def _check_references(db: Session, department_id: Optional[int], location_id: Optional[int]) -> None:
    if department_id is not None and not db.query(Department.id).filter(Department.id == department_id).first():
        raise DomainValidationError(f"Department {department_id} does not exist")
    if location_id is not None and not db.query(Location.id).filter(Location.id == location_id).first():
        raise DomainValidationError(f"Location {location_id} does not exist")


def get_employee(db: Session, employee_id: int) -> Employee:
    """
    Get an employee by ID

    Raises:
        EmployeeNotFoundError: If no such employee
    """
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if employee is None:
        raise EmployeeNotFoundError(employee_id)
    return employee


def create_employee(db: Session, employee_data: EmployeeCreate, actor_id: int) -> Employee:
    """
    Create a new employee and its CREATE history entry in one commit

    Raises:
        DomainValidationError: Unknown department or location
        StoreError: Commit failed
    """
    _check_references(db, employee_data.department_id, employee_data.location_id)

    employee = Employee(**employee_data.model_dump())
    db.add(employee)
    db.flush()

    record_history(db, HistoryEntry(
        table_name=EntityKind.EMPLOYEE,
        record_id=employee.id,
        action=HistoryAction.CREATE,
        new_values=model_snapshot(employee, exclude=_SNAPSHOT_EXCLUDE),
        actor_id=actor_id,
    ), commit=False)
    commit_mutation(db, "create employee")
    db.refresh(employee)
    return employee


def update_employee(
    db: Session,
    employee_id: int,
    employee_data: EmployeeUpdate,
    actor_id: int
) -> Employee:
    """
    Apply the fields set on employee_data. Setting department_id to None
    unassigns the employee.

    Raises:
        EmployeeNotFoundError: Employee does not exist
        DomainValidationError: Unknown department or location
        StoreError: Commit failed
    """
    employee = get_employee(db, employee_id)
    changes = employee_data.model_dump(exclude_unset=True)
    if "location_id" in changes and changes["location_id"] is None:
        raise DomainValidationError("location_id cannot be cleared")
    _check_references(db, changes.get("department_id"), changes.get("location_id"))

    old_values = model_snapshot(employee, exclude=_SNAPSHOT_EXCLUDE)
    for field, value in changes.items():
        setattr(employee, field, value)
    db.flush()

    record_history(db, HistoryEntry(
        table_name=EntityKind.EMPLOYEE,
        record_id=employee.id,
        action=HistoryAction.UPDATE,
        old_values=old_values,
        new_values=model_snapshot(employee, exclude=_SNAPSHOT_EXCLUDE),
        actor_id=actor_id,
    ), commit=False)
    commit_mutation(db, "update employee")
    db.refresh(employee)
    return employee


def delete_employee(db: Session, employee_id: int, actor_id: int) -> None:
    """
    Delete an employee

    Owned training and ticket records are deleted first, each with its own
    DELETE entry whose snapshot keeps employee_id, so the history stays
    reachable as orphaned history. A linked user is unlinked.

    Raises:
        EmployeeNotFoundError: Employee does not exist
        StoreError: Commit failed
    """
    employee = get_employee(db, employee_id)

    for kind, model in (
        (EntityKind.TRAINING_RECORD, TrainingRecord),
        (EntityKind.TICKET_RECORD, TicketRecord),
    ):
        for record in db.query(model).filter(model.employee_id == employee_id).all():
            record_history(db, HistoryEntry(
                table_name=kind,
                record_id=record.id,
                action=HistoryAction.DELETE,
                old_values=model_snapshot(record, exclude=("created_at",)),
                actor_id=actor_id,
            ), commit=False)
            db.delete(record)

    db.query(User).filter(User.employee_id == employee_id).update(
        {User.employee_id: None}, synchronize_session="fetch"
    )

    record_history(db, HistoryEntry(
        table_name=EntityKind.EMPLOYEE,
        record_id=employee_id,
        action=HistoryAction.DELETE,
        old_values=model_snapshot(employee, exclude=_SNAPSHOT_EXCLUDE),
        actor_id=actor_id,
    ), commit=False)
    db.flush()
    db.delete(employee)
    commit_mutation(db, "delete employee")
    logger.info("Employee %s deleted by user %s", employee_id, actor_id)

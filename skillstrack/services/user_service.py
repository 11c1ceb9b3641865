"""
User service - roles and identity-to-employee links

Every change is recorded as a User UPDATE history entry in the same commit.
"""
import logging
from sqlalchemy.orm import Session
from typing import List
from skillstrack.core.exceptions import ConflictError, DomainValidationError, ResourceNotFoundError
from skillstrack.core.permissions import Capability, has_capability
from skillstrack.models.history import EntityKind, HistoryAction
from skillstrack.models.manager_department import ManagerDepartment
from skillstrack.models.user import User
from skillstrack.schemas.history import HistoryEntry
from skillstrack.schemas.user import UserUpdate
from skillstrack.services.employee_service import get_employee
from skillstrack.services.history_service import commit_mutation, record_history
from skillstrack.services.manager_department_service import (
    department_manager_ids,
    record_manager_change,
)
from skillstrack.utils.json_serializer import model_snapshot

logger = logging.getLogger(__name__)


def user_snapshot(user: User) -> dict:
    snapshot = model_snapshot(user, exclude=("created_at",))
    snapshot["managed_department_ids"] = user.managed_department_ids
    return snapshot


def _record_user_change(db: Session, user: User, old_values: dict, actor_id: int) -> None:
    db.flush()
    record_history(db, HistoryEntry(
        table_name=EntityKind.USER,
        record_id=user.id,
        action=HistoryAction.UPDATE,
        old_values=old_values,
        new_values=user_snapshot(user),
        actor_id=actor_id,
    ), commit=False)


def get_user(db: Session, user_id: int) -> User:
    """
    Raises:
        ResourceNotFoundError: No such user
    """
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


def list_users(db: Session) -> List[User]:
    """List users ordered by name"""
    return db.query(User).order_by(User.name).all()


def update_user(db: Session, user_id: int, user_data: UserUpdate, actor_id: int) -> User:
    """
    Change a user's role or active flag

    A user whose new role cannot manage departments loses its manager
    assignments; each affected department gets its own UPDATE entry.

    Raises:
        ResourceNotFoundError: User does not exist
        DomainValidationError: Actor tries to change their own role
        StoreError: Commit failed
    """
    user = get_user(db, user_id)
    old_values = user_snapshot(user)

    if user_data.role is not None and user_data.role.value != user.role:
        if user.id == actor_id:
            raise DomainValidationError("Cannot change your own role")
        user.role = user_data.role.value

        if not has_capability(user.role, Capability.DEPARTMENT_MANAGE):
            assignments = db.query(ManagerDepartment).filter(ManagerDepartment.manager_id == user.id).all()
            before = {a.department_id: department_manager_ids(db, a.department_id) for a in assignments}
            db.expire(user, ["managed_departments"])
            for assignment in assignments:
                db.delete(assignment)
            db.flush()
            for department_id, manager_ids in before.items():
                record_manager_change(
                    db, department_id, manager_ids, department_manager_ids(db, department_id), actor_id
                )

    if user_data.active is not None:
        user.active = user_data.active

    _record_user_change(db, user, old_values, actor_id)
    commit_mutation(db, "update user")
    db.refresh(user)
    logger.info("User %s updated by user %s", user_id, actor_id)
    return user


def link_employee(db: Session, user_id: int, employee_id: int, actor_id: int) -> User:
    """
    Link a user to the employee record it represents

    Raises:
        ResourceNotFoundError: User does not exist
        EmployeeNotFoundError: Employee does not exist
        ConflictError: Employee is already linked to another user
        StoreError: Commit failed
    """
    user = get_user(db, user_id)
    get_employee(db, employee_id)

    existing = db.query(User).filter(User.employee_id == employee_id, User.id != user_id).first()
    if existing:
        raise ConflictError(
            "Employee is already linked to another user",
            {"employee_id": employee_id, "user_id": existing.id},
        )

    old_values = user_snapshot(user)
    user.employee_id = employee_id
    _record_user_change(db, user, old_values, actor_id)
    commit_mutation(db, "link user employee")
    db.refresh(user)
    return user


def unlink_employee(db: Session, user_id: int, actor_id: int) -> User:
    """
    Remove a user's employee link

    Raises:
        ResourceNotFoundError: User does not exist
        DomainValidationError: User is not linked to any employee
        StoreError: Commit failed
    """
    user = get_user(db, user_id)
    if user.employee_id is None:
        raise DomainValidationError("User is not linked to any employee")

    old_values = user_snapshot(user)
    user.employee_id = None
    _record_user_change(db, user, old_values, actor_id)
    commit_mutation(db, "unlink user employee")
    db.refresh(user)
    return user

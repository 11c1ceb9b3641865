"""
History service - append-only audit store and its queries
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from skillstrack.core.exceptions import AccessDeniedError, EmployeeNotFoundError, StoreError
from skillstrack.core.permissions import Capability, capabilities_for
from skillstrack.models.employee import Employee
from skillstrack.models.history import EntityKind, HistoryRecord
from skillstrack.models.ticket_record import TicketRecord
from skillstrack.models.training_record import TrainingRecord
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.history import (
    EmployeeRef,
    HistoryEntry,
    HistoryFilter,
    HistoryListFilter,
    HistoryOut,
    HistoryPage,
)
from skillstrack.services.org_graph import OrgGraphAccessor
from skillstrack.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)

# Record kinds owned by an employee through an employee_id column
_OWNED_KINDS = {
    EntityKind.TRAINING_RECORD: TrainingRecord,
    EntityKind.TICKET_RECORD: TicketRecord,
}


def record_history(db: Session, entry: HistoryEntry, commit: bool = True) -> HistoryRecord:
    """
    Append one history entry

    Args:
        db: Database session
        entry: The change to record
        commit: If False, the row joins the caller's unit of work and is
            committed together with the primary write (see commit_mutation)

    Returns:
        The HistoryRecord row (committed when commit=True)

    Raises:
        StoreError: If the append fails; the session is rolled back
    """
    row = HistoryRecord(
        table_name=entry.table_name.value,
        record_id=entry.record_id,
        action=entry.action.value,
        old_values=sanitize_for_json(entry.old_values),
        new_values=sanitize_for_json(entry.new_values),
        actor_id=entry.actor_id,
        timestamp=entry.timestamp or datetime.now(timezone.utc),
    )
    db.add(row)
    if not commit:
        return row

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("History append failed for %s:%s", entry.table_name.value, entry.record_id, exc_info=True)
        raise StoreError("record", str(e)) from e
    db.refresh(row)
    logger.debug("History %s recorded: %s %s:%s", row.id, row.action, row.table_name, row.record_id)
    return row


def commit_mutation(db: Session, operation: str) -> None:
    """
    Commit a primary write together with its pending history entries

    Success is only reported once both are durable; any failure rolls back
    both and surfaces as StoreError.
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Commit failed during %s", operation, exc_info=True)
        raise StoreError(operation, str(e)) from e


def _snapshot_owner():
    """employee_id captured in the entry's snapshots, newest first"""
    return func.coalesce(
        HistoryRecord.new_values["employee_id"].as_integer(),
        HistoryRecord.old_values["employee_id"].as_integer(),
    )


def _ownership_clause(employee_id: int, include_orphaned: bool = False):
    """
    History of the employee itself and of the records it owns

    A record entry only counts when its snapshot names this employee (or
    names nobody), so a reused record id never pulls in another employee's
    history. With include_orphaned, entries of records that no longer exist
    are matched on the snapshot alone.
    """
    owner = _snapshot_owner()
    clauses = [
        and_(
            HistoryRecord.table_name == EntityKind.EMPLOYEE.value,
            HistoryRecord.record_id == employee_id,
        )
    ]
    for kind, model in _OWNED_KINDS.items():
        owned_ids = select(model.id).where(model.employee_id == employee_id)
        current = and_(
            HistoryRecord.record_id.in_(owned_ids),
            or_(owner.is_(None), owner == employee_id),
        )
        if include_orphaned:
            current = or_(current, owner == employee_id)
        clauses.append(and_(HistoryRecord.table_name == kind.value, current))
    return or_(*clauses)


def _ordered(query):
    # id breaks ties between entries written within the same clock tick
    return query.order_by(HistoryRecord.timestamp.desc(), HistoryRecord.id.desc())


def _page(
    rows: List[HistoryRecord],
    total_count: int,
    limit: Optional[int],
    offset: Optional[int],
    employee: Optional[Employee] = None,
    include_orphaned: bool = False,
) -> HistoryPage:
    offset_num = offset or 0
    return HistoryPage(
        employee=EmployeeRef.model_validate(employee) if employee is not None else None,
        data=[HistoryOut.model_validate(r) for r in rows],
        total_count=total_count,
        has_more=limit is not None and total_count > offset_num + limit,
        include_orphaned=include_orphaned,
    )


def query_employee_history(
    db: Session,
    employee_id: int,
    filters: Optional[HistoryFilter] = None
) -> HistoryPage:
    """
    History of an employee and of the training/ticket records it owns

    Args:
        db: Database session
        employee_id: Subject employee
        filters: action / limit / offset / include_orphaned

    Returns:
        HistoryPage ordered most recent first

    Raises:
        EmployeeNotFoundError: Employee absent and include_orphaned is False
    """
    filters = filters or HistoryFilter()
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if employee is None and not filters.include_orphaned:
        raise EmployeeNotFoundError(employee_id)

    query = db.query(HistoryRecord).filter(
        _ownership_clause(employee_id, include_orphaned=filters.include_orphaned)
    )
    if filters.action is not None:
        query = query.filter(HistoryRecord.action == filters.action.value)

    total_count = query.count()
    query = _ordered(query)
    if filters.offset:
        query = query.offset(filters.offset)
    if filters.limit is not None:
        query = query.limit(filters.limit)
    return _page(
        query.all(),
        total_count,
        filters.limit,
        filters.offset,
        employee,
        include_orphaned=filters.include_orphaned,
    )


def query_history(
    db: Session,
    actor: Actor,
    filters: Optional[HistoryListFilter] = None
) -> HistoryPage:
    """
    General history listing scoped to what the actor may see

    Unrestricted for employee.viewAll. Department managers see history of
    their managed departments, of the employees in them, and of the records
    those employees own.

    Raises:
        AccessDeniedError: Actor has no history scope, or manages no departments
    """
    filters = filters or HistoryListFilter()
    capabilities = capabilities_for(actor.role)

    query = db.query(HistoryRecord)
    if filters.table_name is not None:
        query = query.filter(HistoryRecord.table_name == filters.table_name.value)
    if filters.record_id is not None:
        query = query.filter(HistoryRecord.record_id == filters.record_id)
    if filters.action is not None:
        query = query.filter(HistoryRecord.action == filters.action.value)

    if Capability.EMPLOYEE_VIEW_ALL in capabilities:
        pass
    elif Capability.EMPLOYEE_VIEW_DEPARTMENT in capabilities:
        department_ids = OrgGraphAccessor(db).managed_department_ids(actor.id)
        if not department_ids:
            logger.info("History listing denied: user %s manages no departments", actor.id)
            raise AccessDeniedError(actor.id, "history")
        employee_ids = select(Employee.id).where(Employee.department_id.in_(department_ids))
        scope = [
            and_(
                HistoryRecord.table_name == EntityKind.DEPARTMENT.value,
                HistoryRecord.record_id.in_(department_ids),
            ),
            and_(
                HistoryRecord.table_name == EntityKind.EMPLOYEE.value,
                HistoryRecord.record_id.in_(employee_ids),
            ),
        ]
        owner = _snapshot_owner()
        for kind, model in _OWNED_KINDS.items():
            scope.append(
                and_(
                    HistoryRecord.table_name == kind.value,
                    HistoryRecord.record_id.in_(
                        select(model.id).where(model.employee_id.in_(employee_ids))
                    ),
                    or_(owner.is_(None), owner.in_(employee_ids)),
                )
            )
        query = query.filter(or_(*scope))
    else:
        raise AccessDeniedError(actor.id, "history")

    total_count = query.count()
    query = _ordered(query)
    if filters.offset:
        query = query.offset(filters.offset)
    if filters.limit is not None:
        query = query.limit(filters.limit)
    return _page(query.all(), total_count, filters.limit, filters.offset)

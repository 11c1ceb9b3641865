"""
Training and ticket record service

Both record kinds are owned by an employee; their history snapshots always
carry employee_id so the entries stay attributable after deletion.
"""
from sqlalchemy.orm import Session
from typing import Type, Union
from skillstrack.core.exceptions import ResourceNotFoundError
from skillstrack.models.history import EntityKind, HistoryAction
from skillstrack.models.ticket_record import TicketRecord
from skillstrack.models.training_record import TrainingRecord
from skillstrack.schemas.history import HistoryEntry
from skillstrack.schemas.records import TicketRecordCreate, TrainingRecordCreate
from skillstrack.services.employee_service import get_employee
from skillstrack.services.history_service import commit_mutation, record_history
from skillstrack.utils.json_serializer import model_snapshot

OwnedRecord = Union[TrainingRecord, TicketRecord]

_KINDS = {
    TrainingRecord: EntityKind.TRAINING_RECORD,
    TicketRecord: EntityKind.TICKET_RECORD,
}


def _create(db: Session, model: Type[OwnedRecord], data, actor_id: int) -> OwnedRecord:
    get_employee(db, data.employee_id)

    record = model(**data.model_dump())
    db.add(record)
    db.flush()
    record_history(db, HistoryEntry(
        table_name=_KINDS[model],
        record_id=record.id,
        action=HistoryAction.CREATE,
        new_values=model_snapshot(record, exclude=("created_at",)),
        actor_id=actor_id,
    ), commit=False)
    commit_mutation(db, f"create {_KINDS[model].value}")
    db.refresh(record)
    return record


def get_record(db: Session, model: Type[OwnedRecord], record_id: int) -> OwnedRecord:
    """
    Raises:
        ResourceNotFoundError: No such record
    """
    record = db.query(model).filter(model.id == record_id).first()
    if record is None:
        raise ResourceNotFoundError(_KINDS[model].value, record_id)
    return record


def delete_record(db: Session, model: Type[OwnedRecord], record_id: int, actor_id: int) -> None:
    """Delete a training or ticket record and record the DELETE in one commit"""
    record = get_record(db, model, record_id)
    record_history(db, HistoryEntry(
        table_name=_KINDS[model],
        record_id=record.id,
        action=HistoryAction.DELETE,
        old_values=model_snapshot(record, exclude=("created_at",)),
        actor_id=actor_id,
    ), commit=False)
    db.delete(record)
    commit_mutation(db, f"delete {_KINDS[model].value}")


def create_training_record(db: Session, data: TrainingRecordCreate, actor_id: int) -> TrainingRecord:
    """
    Raises:
        EmployeeNotFoundError: Owner does not exist
        StoreError: Commit failed
    """
    return _create(db, TrainingRecord, data, actor_id)


def create_ticket_record(db: Session, data: TicketRecordCreate, actor_id: int) -> TicketRecord:
    """
    Raises:
        EmployeeNotFoundError: Owner does not exist
        StoreError: Commit failed
    """
    return _create(db, TicketRecord, data, actor_id)

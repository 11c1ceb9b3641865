"""
History (audit) model

Append-only: rows are never updated or deleted once flushed. record_id is a
weak back-reference to (table_name, record_id); the referenced row may have
been deleted since, which is what makes orphaned history possible.
"""
import enum
from sqlalchemy import Column, Integer, String, DateTime, JSON, Index, event
from skillstrack.core.exceptions import AppendOnlyViolationError
from skillstrack.db.base import Base


class EntityKind(str, enum.Enum):
    EMPLOYEE = "Employee"
    DEPARTMENT = "Department"
    TRAINING_RECORD = "TrainingRecord"
    TICKET_RECORD = "TicketRecord"
    USER = "User"


class HistoryAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class HistoryRecord(Base):
    __tablename__ = "history"

    id = Column(Integer, primary_key=True, index=True)
    table_name = Column(String, nullable=False)
    record_id = Column(Integer, nullable=False)
    action = Column(String, nullable=False)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    # No foreign key: history must outlive the user who made the change
    actor_id = Column(Integer, nullable=True, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (
        Index("ix_history_table_record", "table_name", "record_id"),
        {"sqlite_autoincrement": True},
    )


@event.listens_for(HistoryRecord, "before_update")
def _reject_history_update(mapper, connection, target):
    raise AppendOnlyViolationError(target.id, "update")


@event.listens_for(HistoryRecord, "before_delete")
def _reject_history_delete(mapper, connection, target):
    raise AppendOnlyViolationError(target.id, "delete")

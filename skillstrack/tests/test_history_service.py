"""
Tests for the audit history store
"""
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from skillstrack.core.exceptions import (
    AccessDeniedError,
    AppendOnlyViolationError,
    EmployeeNotFoundError,
    StoreError,
)
from skillstrack.core.permissions import Role
from skillstrack.models.history import EntityKind, HistoryAction, HistoryRecord
from skillstrack.models.ticket_record import TicketRecord
from skillstrack.models.training_record import TrainingRecord
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.history import HistoryEntry, HistoryFilter, HistoryListFilter
from skillstrack.schemas.records import TrainingRecordCreate
from skillstrack.services.employee_service import delete_employee
from skillstrack.services.record_service import create_training_record, delete_record
from skillstrack.services.history_service import (
    query_employee_history,
    query_history,
    record_history,
)
from skillstrack.tests.helpers import assign

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def _entry(kind, record_id, action=HistoryAction.UPDATE, minutes=0, **kwargs):
    return HistoryEntry(
        table_name=kind,
        record_id=record_id,
        action=action,
        timestamp=T0 + timedelta(minutes=minutes),
        **kwargs,
    )


@pytest.fixture
def employee(make_employee, logistics):
    return make_employee(department=logistics)


@pytest.fixture
def training(db, employee):
    record = TrainingRecord(
        employee_id=employee.id,
        training_name="First Aid",
        date_completed=date(2025, 2, 1),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def test_record_history_appends_committed_row(db, admin):
    row = record_history(db, HistoryEntry(
        table_name=EntityKind.DEPARTMENT,
        record_id=7,
        action=HistoryAction.CREATE,
        new_values={"name": "Logistics", "created": date(2025, 1, 1)},
        actor_id=admin.id,
    ))

    assert row.id is not None
    assert row.table_name == "Department"
    assert row.action == "CREATE"
    assert row.old_values is None
    assert row.new_values == {"name": "Logistics", "created": "2025-01-01"}
    assert row.actor_id == admin.id
    assert row.timestamp is not None


def test_system_changes_have_no_actor(db):
    row = record_history(db, _entry(EntityKind.EMPLOYEE, 1))
    assert row.actor_id is None


def test_second_record_is_independent(db):
    first = record_history(db, _entry(EntityKind.EMPLOYEE, 1, new_values={"title": "A"}))
    second = record_history(db, _entry(EntityKind.EMPLOYEE, 1, new_values={"title": "B"}))

    assert first.id != second.id
    rows = db.query(HistoryRecord).order_by(HistoryRecord.id).all()
    assert [r.new_values["title"] for r in rows] == ["A", "B"]


def test_history_rows_cannot_be_updated(db):
    row = record_history(db, _entry(EntityKind.EMPLOYEE, 1, new_values={"title": "A"}))
    row.action = HistoryAction.DELETE.value
    with pytest.raises(AppendOnlyViolationError):
        db.commit()
    db.rollback()
    assert db.query(HistoryRecord).one().action == "UPDATE"


def test_history_rows_cannot_be_deleted(db):
    row = record_history(db, _entry(EntityKind.EMPLOYEE, 1))
    db.delete(row)
    with pytest.raises(AppendOnlyViolationError):
        db.commit()
    db.rollback()
    assert db.query(HistoryRecord).count() == 1


def test_store_failure_surfaces_as_store_error(db, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(StoreError):
        record_history(db, _entry(EntityKind.EMPLOYEE, 1))
    monkeypatch.undo()

    assert db.query(HistoryRecord).count() == 0


def test_employee_history_most_recent_first(db, employee):
    # Inserted out of chronological order
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=10))
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, action=HistoryAction.CREATE, minutes=0))
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=20))

    page = query_employee_history(db, employee.id)

    timestamps = [r.timestamp.replace(tzinfo=None) for r in page.data]
    assert timestamps == sorted(timestamps, reverse=True)
    assert page.data[-1].action == HistoryAction.CREATE
    assert page.total_count == 3
    assert page.has_more is False
    assert page.employee.id == employee.id


def test_employee_history_includes_owned_records_only(db, employee, training, make_employee):
    other = make_employee(first_name="Other")
    other_training = TrainingRecord(employee_id=other.id, training_name="Forklift", date_completed=date(2025, 1, 1))
    db.add(other_training)
    db.commit()

    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=1))
    record_history(db, _entry(EntityKind.TRAINING_RECORD, training.id, action=HistoryAction.CREATE, minutes=2))
    record_history(db, _entry(EntityKind.TRAINING_RECORD, other_training.id, action=HistoryAction.CREATE, minutes=3))
    record_history(db, _entry(EntityKind.EMPLOYEE, other.id, minutes=4))
    # Same numeric id, different table: not this employee's history
    record_history(db, _entry(EntityKind.DEPARTMENT, employee.id, minutes=5))

    page = query_employee_history(db, employee.id)

    assert [(r.table_name, r.record_id) for r in page.data] == [
        (EntityKind.TRAINING_RECORD, training.id),
        (EntityKind.EMPLOYEE, employee.id),
    ]


def test_action_filter(db, employee):
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, action=HistoryAction.CREATE, minutes=0))
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=1))
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=2))

    page = query_employee_history(db, employee.id, HistoryFilter(action=HistoryAction.UPDATE))

    assert page.total_count == 2
    assert {r.action for r in page.data} == {HistoryAction.UPDATE}


def test_pagination_is_stable(db, employee):
    for minutes in range(3):
        record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=minutes))

    full = query_employee_history(db, employee.id)
    first = query_employee_history(db, employee.id, HistoryFilter(limit=1, offset=0))
    second = query_employee_history(db, employee.id, HistoryFilter(limit=1, offset=1))

    assert [first.data[0].id, second.data[0].id] == [r.id for r in full.data[:2]]
    assert first.has_more is True
    assert first.total_count == 3
    last = query_employee_history(db, employee.id, HistoryFilter(limit=2, offset=2))
    assert [r.id for r in last.data] == [full.data[2].id]
    assert last.has_more is False


def test_no_implicit_cap(db, employee):
    for minutes in range(150):
        record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=minutes), commit=False)
    db.commit()

    page = query_employee_history(db, employee.id)
    assert len(page.data) == 150


def test_missing_employee_raises_by_default(db):
    with pytest.raises(EmployeeNotFoundError):
        query_employee_history(db, 4242)


def test_orphaned_history_after_delete(db, employee, training, admin):
    ticket = TicketRecord(employee_id=employee.id, ticket_name="White Card", date_issued=date(2024, 6, 1))
    db.add(ticket)
    db.commit()
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, action=HistoryAction.CREATE, minutes=0))
    record_history(db, _entry(
        EntityKind.TRAINING_RECORD, training.id, action=HistoryAction.CREATE, minutes=1,
        new_values={"id": training.id, "employee_id": employee.id},
    ))
    employee_id = employee.id

    delete_employee(db, employee_id, admin.id)

    with pytest.raises(EmployeeNotFoundError):
        query_employee_history(db, employee_id)
    with pytest.raises(EmployeeNotFoundError):
        query_employee_history(db, employee_id, HistoryFilter(include_orphaned=False))

    page = query_employee_history(db, employee_id, HistoryFilter(include_orphaned=True))

    assert page.employee is None
    assert page.include_orphaned is True
    entries = {(r.table_name, r.action) for r in page.data}
    assert entries == {
        (EntityKind.EMPLOYEE, HistoryAction.CREATE),
        (EntityKind.EMPLOYEE, HistoryAction.DELETE),
        (EntityKind.TRAINING_RECORD, HistoryAction.CREATE),
        (EntityKind.TRAINING_RECORD, HistoryAction.DELETE),
        (EntityKind.TICKET_RECORD, HistoryAction.DELETE),
    }
    assert page.total_count == 5


def test_orphan_mode_excludes_other_employees_records(db, employee, make_employee, admin):
    other = make_employee(first_name="Other")
    record_history(db, _entry(
        EntityKind.TRAINING_RECORD, 900, action=HistoryAction.DELETE,
        old_values={"id": 900, "employee_id": other.id},
    ))
    record_history(db, _entry(
        EntityKind.TRAINING_RECORD, 901, action=HistoryAction.DELETE,
        old_values={"id": 901, "employee_id": employee.id},
    ))

    default = query_employee_history(db, employee.id)
    orphaned = query_employee_history(db, employee.id, HistoryFilter(include_orphaned=True))

    assert default.total_count == 0
    assert [r.record_id for r in orphaned.data] == [901]


def test_orphan_mode_paginates_after_ordering(db, employee):
    for minutes in range(4):
        record_history(db, _entry(
            EntityKind.TICKET_RECORD, 500 + minutes, action=HistoryAction.DELETE, minutes=minutes,
            old_values={"employee_id": employee.id},
        ))

    page = query_employee_history(db, employee.id, HistoryFilter(include_orphaned=True, limit=2, offset=1))

    assert [r.record_id for r in page.data] == [502, 501]
    assert page.total_count == 4
    assert page.has_more is True


def test_general_listing_for_admin(db, admin):
    record_history(db, _entry(EntityKind.DEPARTMENT, 1, minutes=0))
    record_history(db, _entry(EntityKind.EMPLOYEE, 1, minutes=1))

    page = query_history(db, Actor(id=admin.id, role=Role.ADMIN))
    assert page.total_count == 2

    page = query_history(db, Actor(id=admin.id, role=Role.ADMIN), HistoryListFilter(table_name=EntityKind.DEPARTMENT))
    assert [r.table_name for r in page.data] == [EntityKind.DEPARTMENT]


def test_general_listing_scoped_for_manager(db, manager, logistics, quality, make_employee):
    mine = make_employee(department=logistics)
    theirs = make_employee(first_name="Q", department=quality)
    assign(db, manager, logistics)
    my_training = TrainingRecord(employee_id=mine.id, training_name="WHS", date_completed=date(2025, 1, 1))
    db.add(my_training)
    db.commit()

    record_history(db, _entry(EntityKind.EMPLOYEE, mine.id, minutes=0))
    record_history(db, _entry(EntityKind.EMPLOYEE, theirs.id, minutes=1))
    record_history(db, _entry(EntityKind.DEPARTMENT, logistics.id, minutes=2))
    record_history(db, _entry(EntityKind.DEPARTMENT, quality.id, minutes=3))
    record_history(db, _entry(EntityKind.TRAINING_RECORD, my_training.id, minutes=4))

    page = query_history(db, Actor(id=manager.id, role=Role.DEPARTMENT_MANAGER))

    assert [(r.table_name, r.record_id) for r in page.data] == [
        (EntityKind.TRAINING_RECORD, my_training.id),
        (EntityKind.DEPARTMENT, logistics.id),
        (EntityKind.EMPLOYEE, mine.id),
    ]


def test_general_listing_denied_without_scope(db, manager, make_user):
    with pytest.raises(AccessDeniedError):
        query_history(db, Actor(id=manager.id, role=Role.DEPARTMENT_MANAGER))

    warden = make_user(Role.FIRE_WARDEN)
    with pytest.raises(AccessDeniedError):
        query_history(db, Actor(id=warden.id, role=Role.FIRE_WARDEN))


def test_deleted_record_ids_are_not_reused(db, employee, make_employee, admin):
    other = make_employee(first_name="Bob")
    first = create_training_record(db, TrainingRecordCreate(
        employee_id=employee.id, training_name="First Aid", date_completed=date(2025, 1, 1),
    ), admin.id)
    first_id = first.id
    delete_record(db, TrainingRecord, first_id, admin.id)

    second = create_training_record(db, TrainingRecordCreate(
        employee_id=other.id, training_name="Forklift", date_completed=date(2025, 1, 2),
    ), admin.id)

    assert second.id != first_id
    page = query_employee_history(db, other.id)
    assert [(r.record_id, r.action) for r in page.data] == [(second.id, HistoryAction.CREATE)]


def test_record_entries_naming_another_employee_are_excluded(db, employee, training, make_employee):
    other = make_employee(first_name="Bob")
    record_history(db, _entry(
        EntityKind.TRAINING_RECORD, training.id, action=HistoryAction.CREATE, minutes=0,
        new_values={"id": training.id, "employee_id": other.id},
    ))
    record_history(db, _entry(
        EntityKind.TRAINING_RECORD, training.id, minutes=1,
        old_values={"id": training.id, "employee_id": employee.id},
        new_values={"id": training.id, "employee_id": employee.id},
    ))

    page = query_employee_history(db, employee.id)

    assert [r.action for r in page.data] == [HistoryAction.UPDATE]
    assert query_employee_history(db, other.id).total_count == 0


def test_offset_timestamps_are_ordered_by_instant(db, employee):
    # 10:00+02:00 is 08:00Z, an hour before the second entry
    record_history(db, HistoryEntry(
        table_name=EntityKind.EMPLOYEE, record_id=employee.id, action=HistoryAction.UPDATE,
        timestamp=datetime(2025, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=2))),
        new_values={"note": "older"},
    ))
    record_history(db, HistoryEntry(
        table_name=EntityKind.EMPLOYEE, record_id=employee.id, action=HistoryAction.UPDATE,
        timestamp=datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc),
        new_values={"note": "newer"},
    ))

    page = query_employee_history(db, employee.id)

    assert [r.new_values["note"] for r in page.data] == ["newer", "older"]
    assert page.data[1].timestamp.replace(tzinfo=None) == datetime(2025, 3, 1, 8, 0)


def test_entry_timestamps_normalized_to_utc():
    aware = HistoryEntry(
        table_name=EntityKind.EMPLOYEE, record_id=1, action=HistoryAction.UPDATE,
        timestamp=datetime(2025, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=10))),
    )
    naive = HistoryEntry(
        table_name=EntityKind.EMPLOYEE, record_id=1, action=HistoryAction.UPDATE,
        timestamp=datetime(2025, 3, 1, 10, 0),
    )

    assert aware.timestamp == datetime(2025, 3, 1, 0, 0, tzinfo=timezone.utc)
    assert aware.timestamp.utcoffset() == timedelta(0)
    assert naive.timestamp == datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_orphan_mode_filters_action_before_paginating(db, employee, make_employee):
    other = make_employee(first_name="Other")
    for minutes in range(3):
        record_history(db, _entry(
            EntityKind.TICKET_RECORD, 700 + minutes, action=HistoryAction.DELETE, minutes=minutes,
            old_values={"employee_id": employee.id},
        ))
    record_history(db, _entry(
        EntityKind.TICKET_RECORD, 703, action=HistoryAction.DELETE, minutes=3,
        old_values={"employee_id": other.id},
    ))
    record_history(db, _entry(EntityKind.EMPLOYEE, employee.id, minutes=4))

    page = query_employee_history(db, employee.id, HistoryFilter(
        include_orphaned=True, action=HistoryAction.DELETE, limit=1, offset=1,
    ))

    assert [r.record_id for r in page.data] == [701]
    assert page.total_count == 3
    assert page.has_more is True

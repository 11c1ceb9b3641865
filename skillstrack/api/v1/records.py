"""
Training record and ticket record endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from skillstrack.core.deps import get_db, get_org_graph, require_capabilities
from skillstrack.core.permissions import Capability
from skillstrack.models.ticket_record import TicketRecord
from skillstrack.models.training_record import TrainingRecord
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.records import (
    TicketRecordCreate,
    TicketRecordOut,
    TrainingRecordCreate,
    TrainingRecordOut,
)
from skillstrack.services.access_service import ensure_employee_access
from skillstrack.services.org_graph import OrgGraphAccessor
from skillstrack.services.record_service import (
    create_ticket_record,
    create_training_record,
    delete_record,
    get_record,
)

training_router = APIRouter()
ticket_router = APIRouter()


@training_router.post("", response_model=TrainingRecordOut, status_code=201)
async def create_training_record_endpoint(
    data: TrainingRecordCreate,
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(require_capabilities(Capability.EMPLOYEE_EDIT))
):
    """Record completed training for an employee"""
    ensure_employee_access(org, actor.id, actor.role, data.employee_id)
    return create_training_record(db, data, actor.id)


@training_router.delete("/{record_id}", status_code=204)
async def delete_training_record_endpoint(
    record_id: int,
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(require_capabilities(Capability.EMPLOYEE_EDIT))
):
    """Delete a training record"""
    record = get_record(db, TrainingRecord, record_id)
    ensure_employee_access(org, actor.id, actor.role, record.employee_id)
    delete_record(db, TrainingRecord, record_id, actor.id)
    return None


@ticket_router.post("", response_model=TicketRecordOut, status_code=201)
async def create_ticket_record_endpoint(
    data: TicketRecordCreate,
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(require_capabilities(Capability.EMPLOYEE_EDIT))
):
    """Record a ticket (licence) held by an employee"""
    ensure_employee_access(org, actor.id, actor.role, data.employee_id)
    return create_ticket_record(db, data, actor.id)


@ticket_router.delete("/{record_id}", status_code=204)
async def delete_ticket_record_endpoint(
    record_id: int,
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(require_capabilities(Capability.EMPLOYEE_EDIT))
):
    """Delete a ticket record"""
    record = get_record(db, TicketRecord, record_id)
    ensure_employee_access(org, actor.id, actor.role, record.employee_id)
    delete_record(db, TicketRecord, record_id, actor.id)
    return None

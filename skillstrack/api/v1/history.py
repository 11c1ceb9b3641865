"""
History endpoints - audit trail reads behind the access resolver
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from skillstrack.core.deps import get_db, get_current_actor, get_org_graph
from skillstrack.models.history import EntityKind, HistoryAction
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.history import HistoryFilter, HistoryListFilter, HistoryPage
from skillstrack.services.access_service import ensure_employee_access
from skillstrack.services.history_service import query_employee_history, query_history
from skillstrack.services.org_graph import OrgGraphAccessor

router = APIRouter()


@router.get("", response_model=HistoryPage)
async def list_history_endpoint(
    table_name: Optional[EntityKind] = Query(None, alias="tableName"),
    record_id: Optional[int] = Query(None, alias="recordId"),
    action: Optional[HistoryAction] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """List history records visible to the actor, most recent first"""
    filters = HistoryListFilter(
        table_name=table_name,
        record_id=record_id,
        action=action,
        limit=limit,
        offset=offset,
    )
    return query_history(db, actor, filters)


@router.get("/employee/{employee_id}", response_model=HistoryPage)
async def employee_history_endpoint(
    employee_id: int,
    action: Optional[HistoryAction] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    include_orphaned: bool = Query(False, alias="includeOrphaned"),
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(get_current_actor)
):
    """
    History of an employee and of the training/ticket records it owns

    403 when the resolver denies, 404 when the employee does not exist
    (unless includeOrphaned is set and the actor may see orphaned history).
    """
    ensure_employee_access(org, actor.id, actor.role, employee_id)
    filters = HistoryFilter(
        action=action,
        limit=limit,
        offset=offset,
        include_orphaned=include_orphaned,
    )
    return query_employee_history(db, employee_id, filters)

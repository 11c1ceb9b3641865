"""
Employee endpoints - every employee-scoped route goes through the access resolver
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from skillstrack.core.deps import get_db, get_current_actor, get_org_graph, require_capabilities
from skillstrack.core.permissions import Capability
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.employee import EmployeeCreate, EmployeeOut, EmployeeUpdate
from skillstrack.services.access_service import ensure_department_assignment, ensure_employee_access
from skillstrack.services.employee_service import (
    create_employee,
    delete_employee,
    get_employee,
    update_employee,
)
from skillstrack.services.org_graph import OrgGraphAccessor

router = APIRouter()


@router.post("", response_model=EmployeeOut, status_code=201)
async def create_employee_endpoint(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.EMPLOYEE_CREATE))
):
    """Create an employee"""
    return create_employee(db, employee_data, actor.id)


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(get_current_actor)
):
    """Get an employee the actor may access"""
    ensure_employee_access(org, actor.id, actor.role, employee_id)
    return get_employee(db, employee_id)


@router.patch("/{employee_id}", response_model=EmployeeOut)
async def update_employee_endpoint(
    employee_id: int,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(require_capabilities(Capability.EMPLOYEE_EDIT))
):
    """Update an employee (including department reassignment)"""
    ensure_employee_access(org, actor.id, actor.role, employee_id)
    if "department_id" in employee_data.model_fields_set:
        ensure_department_assignment(org, actor.id, actor.role, employee_data.department_id)
    return update_employee(db, employee_id, employee_data, actor.id)


@router.delete("/{employee_id}", status_code=204)
async def delete_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    org: OrgGraphAccessor = Depends(get_org_graph),
    actor: Actor = Depends(require_capabilities(Capability.EMPLOYEE_DELETE))
):
    """Delete an employee; its history remains queryable as orphaned history"""
    ensure_employee_access(org, actor.id, actor.role, employee_id)
    delete_employee(db, employee_id, actor.id)
    return None

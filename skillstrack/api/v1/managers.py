"""
Manager-Department assignment endpoints
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from skillstrack.core.deps import get_db, require_capabilities
from skillstrack.core.permissions import Capability
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.manager_department import (
    AssignDepartmentsRequest,
    ManagerDepartmentOut
)
from skillstrack.services.manager_department_service import (
    assign_departments_to_manager,
    list_manager_departments,
    remove_department_from_manager
)

router = APIRouter()


@router.put("/{manager_id}/departments", response_model=List[ManagerDepartmentOut])
async def assign_departments_endpoint(
    manager_id: int,
    request: AssignDepartmentsRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_EDIT))
):
    """Replace the departments a manager manages"""
    return assign_departments_to_manager(db, manager_id, request.department_ids, actor.id)


@router.get("/{manager_id}/departments", response_model=List[ManagerDepartmentOut])
async def list_manager_departments_endpoint(
    manager_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_VIEW_ALL))
):
    """List departments assigned to a manager"""
    return list_manager_departments(db, manager_id)


@router.delete("/{manager_id}/departments/{department_id}", status_code=204)
async def remove_department_endpoint(
    manager_id: int,
    department_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_EDIT))
):
    """Remove a department assignment from a manager"""
    remove_department_from_manager(db, manager_id, department_id, actor.id)
    return None

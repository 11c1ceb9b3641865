"""
Department management endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from skillstrack.core.deps import get_db, require_capabilities
from skillstrack.core.exceptions import ResourceNotFoundError
from skillstrack.core.permissions import Capability
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.department import DepartmentCreate, DepartmentUpdate, DepartmentOut
from skillstrack.services.department_service import (
    create_department,
    delete_department,
    get_department,
    list_departments,
    update_department,
)

router = APIRouter()


@router.post("", response_model=DepartmentOut, status_code=201)
async def create_department_endpoint(
    department_data: DepartmentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_CREATE))
):
    """Create a new department, optionally with managers"""
    return create_department(db, department_data, actor.id)


@router.get("", response_model=List[DepartmentOut])
async def list_departments_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    active_only: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_VIEW))
):
    """List departments"""
    return list_departments(db, skip=skip, limit=limit, active_only=active_only)


@router.get("/{department_id}", response_model=DepartmentOut)
async def get_department_endpoint(
    department_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_VIEW))
):
    """Get a department by ID"""
    department = get_department(db, department_id)
    if not department:
        raise ResourceNotFoundError("Department", department_id)
    return department


@router.patch("/{department_id}", response_model=DepartmentOut)
async def update_department_endpoint(
    department_id: int,
    department_data: DepartmentUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_EDIT))
):
    """Update a department"""
    return update_department(db, department_id, department_data, actor.id)


@router.delete("/{department_id}", status_code=204)
async def delete_department_endpoint(
    department_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_DELETE))
):
    """Delete a department; its employees become unassigned"""
    delete_department(db, department_id, actor.id)
    return None

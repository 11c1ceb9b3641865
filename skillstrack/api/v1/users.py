"""
User management endpoints
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from skillstrack.core.deps import get_db, require_capabilities
from skillstrack.core.permissions import Capability
from skillstrack.schemas.auth import Actor
from skillstrack.schemas.user import LinkEmployeeRequest, UserOut, UserUpdate
from skillstrack.services.user_service import (
    get_user,
    link_employee,
    list_users,
    unlink_employee,
    update_user,
)

router = APIRouter()


@router.get("", response_model=List[UserOut])
async def list_users_endpoint(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.USER_MANAGE))
):
    """List users"""
    return list_users(db)


@router.get("/{user_id}", response_model=UserOut)
async def get_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.USER_MANAGE))
):
    """Get a user by ID"""
    return get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
async def update_user_endpoint(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.USER_MANAGE))
):
    """Change a user's role or active flag"""
    return update_user(db, user_id, user_data, actor.id)


@router.put("/{user_id}/employee", response_model=UserOut)
async def link_employee_endpoint(
    user_id: int,
    request: LinkEmployeeRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.USER_MANAGE))
):
    """Link a user to an employee record"""
    return link_employee(db, user_id, request.employee_id, actor.id)


@router.delete("/{user_id}/employee", response_model=UserOut)
async def unlink_employee_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capabilities(Capability.USER_MANAGE))
):
    """Remove a user's employee link"""
    return unlink_employee(db, user_id, actor.id)

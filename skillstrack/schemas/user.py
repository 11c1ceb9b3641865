"""
User schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict
from skillstrack.core.permissions import Role


class UserUpdate(BaseModel):
    """Schema for updating a user's role or status"""
    role: Optional[Role] = Field(None, description="New role")
    active: Optional[bool] = Field(None, description="User active status")


class LinkEmployeeRequest(BaseModel):
    """Schema for linking a user to an employee record"""
    employee_id: int = Field(..., description="Employee the user is")


class UserOut(BaseModel):
    """Schema for user output"""
    id: int
    email: str
    name: str
    role: str
    employee_id: Optional[int] = None
    active: bool
    managed_department_ids: List[int] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

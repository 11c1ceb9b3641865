"""
Employee schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class EmployeeCreate(BaseModel):
    """Schema for creating an employee"""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    title: Optional[str] = None
    department_id: Optional[int] = Field(None, description="Department ID; None leaves the employee unassigned")
    location_id: int = Field(..., description="Location ID")
    active: bool = True


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee. Only fields that are set are applied."""
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = None
    department_id: Optional[int] = None
    location_id: Optional[int] = None
    active: Optional[bool] = None


class EmployeeOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    title: Optional[str] = None
    department_id: Optional[int] = None
    location_id: int
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

"""
Department schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class DepartmentCreate(BaseModel):
    """Schema for creating a department"""
    name: str = Field(..., min_length=1, description="Department name")
    active: bool = Field(default=True, description="Department active status")
    manager_ids: List[int] = Field(default_factory=list, description="Users who will manage the department")


class DepartmentUpdate(BaseModel):
    """Schema for updating a department"""
    name: Optional[str] = Field(None, min_length=1, description="Department name")
    active: Optional[bool] = Field(None, description="Department active status")


class DepartmentOut(BaseModel):
    """Schema for department output"""
    id: int
    name: str
    active: bool
    manager_ids: List[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

"""
Manager-Department mapping schemas
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import List


class AssignDepartmentsRequest(BaseModel):
    """Schema for assigning departments to a manager"""
    department_ids: List[int] = Field(..., description="List of department IDs to assign")


class ManagerDepartmentOut(BaseModel):
    """Schema for manager-department mapping output"""
    manager_id: int
    department_id: int

    model_config = ConfigDict(from_attributes=True)

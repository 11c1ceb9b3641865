"""
History schemas
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from skillstrack.models.history import EntityKind, HistoryAction


class HistoryEntry(BaseModel):
    """One audit append. The store assigns id and, when omitted, timestamp."""
    table_name: EntityKind = Field(..., description="Kind of entity that was mutated")
    record_id: int = Field(..., description="Identifier within table_name")
    action: HistoryAction
    old_values: Optional[Dict[str, Any]] = Field(None, description="Snapshot before the change")
    new_values: Optional[Dict[str, Any]] = Field(None, description="Snapshot after the change")
    actor_id: Optional[int] = Field(None, description="User who made the change; None for system changes")
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v):
        """Normalize to UTC; naive values are taken as UTC"""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class HistoryFilter(BaseModel):
    """Filters for an employee history query"""
    action: Optional[HistoryAction] = None
    limit: Optional[int] = Field(None, ge=1)
    offset: Optional[int] = Field(None, ge=0)
    include_orphaned: bool = False


class HistoryListFilter(BaseModel):
    """Filters for the general history listing"""
    table_name: Optional[EntityKind] = None
    record_id: Optional[int] = None
    action: Optional[HistoryAction] = None
    limit: Optional[int] = Field(None, ge=1)
    offset: Optional[int] = Field(None, ge=0)


class HistoryOut(BaseModel):
    """Schema for a committed history record"""
    id: int
    table_name: EntityKind
    record_id: int
    action: HistoryAction
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    actor_id: Optional[int] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class EmployeeRef(BaseModel):
    id: int
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class HistoryPage(BaseModel):
    """A page of history, most recent first"""
    employee: Optional[EmployeeRef] = None
    data: List[HistoryOut]
    total_count: int
    has_more: bool
    include_orphaned: bool = False

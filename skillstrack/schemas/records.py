"""
Training and ticket record schemas
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


def _check_prefix(value: Optional[str], prefix: str) -> Optional[str]:
    if value is not None and not value.startswith(prefix):
        raise ValueError(f"image_path must start with '{prefix}'")
    return value


class TrainingRecordCreate(BaseModel):
    employee_id: int
    training_name: str = Field(..., min_length=1)
    date_completed: date
    trainer: Optional[str] = None
    image_path: Optional[str] = Field(None, description="Stored file path under training/")

    @field_validator("image_path")
    @classmethod
    def validate_image_path(cls, v):
        return _check_prefix(v, "training/")


class TrainingRecordOut(BaseModel):
    id: int
    employee_id: int
    training_name: str
    date_completed: date
    trainer: Optional[str] = None
    image_path: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TicketRecordCreate(BaseModel):
    employee_id: int
    ticket_name: str = Field(..., min_length=1)
    licence_number: Optional[str] = None
    date_issued: date
    expiry_date: Optional[date] = None
    image_path: Optional[str] = Field(None, description="Stored file path under tickets/")

    @field_validator("image_path")
    @classmethod
    def validate_image_path(cls, v):
        return _check_prefix(v, "tickets/")


class TicketRecordOut(BaseModel):
    id: int
    employee_id: int
    ticket_name: str
    licence_number: Optional[str] = None
    date_issued: date
    expiry_date: Optional[date] = None
    image_path: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

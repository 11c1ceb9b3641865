"""
JSON serializer utility for converting Python objects to JSON-safe values
"""
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import UUID
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel
from sqlalchemy import inspect


def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively sanitize Python objects for JSON storage (datetime/date -> isoformat, Enum -> value, etc.).
    Use before saving to any JSON columns (history.old_values, history.new_values).
    """
    return to_json_safe(obj)


def to_json_safe(value: Any) -> Any:
    """
    Recursively convert Python objects to JSON-safe values

    Args:
        value: Any Python object to convert

    Returns:
        JSON-safe equivalent of the input value
    """
    if value is None:
        return None
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, (str, int, float, bool)):
        return value
    elif isinstance(value, (date, datetime, time)):
        return value.isoformat()
    elif isinstance(value, Decimal):
        return float(value)
    elif isinstance(value, UUID):
        return str(value)
    elif isinstance(value, dict):
        return {k: to_json_safe(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_safe(item) for item in value]
    elif isinstance(value, BaseModel):
        return to_json_safe(value.model_dump())
    else:
        return str(value)


def model_snapshot(instance: Any, exclude: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Capture the column values of an ORM instance as a JSON-safe dict

    Args:
        instance: Mapped SQLAlchemy object
        exclude: Column attribute names to leave out

    Returns:
        Dict of column name -> JSON-safe value
    """
    skip = set(exclude or ())
    mapper = inspect(instance).mapper
    return {
        attr.key: to_json_safe(getattr(instance, attr.key))
        for attr in mapper.column_attrs
        if attr.key not in skip
    }

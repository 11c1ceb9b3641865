"""
Authentication schemas
"""
from pydantic import BaseModel, ConfigDict
from skillstrack.core.permissions import Role


class Actor(BaseModel):
    """Authenticated identity performing a request. Never persisted."""
    id: int
    role: Role

    model_config = ConfigDict(frozen=True)

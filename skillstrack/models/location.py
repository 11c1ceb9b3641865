"""
Location model
"""
from sqlalchemy import Column, Integer, String, Boolean
from skillstrack.db.base import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    state = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

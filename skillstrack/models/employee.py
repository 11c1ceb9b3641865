"""
Employee model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from skillstrack.db.base import Base


class Employee(Base):
    __tablename__ = "employees"
    # Ids are never reused; history rows refer to them after deletion
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    title = Column(String, nullable=True)
    # Unassigned employees are visible to admins only
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    department = relationship("Department", backref="employees")
    location = relationship("Location")
    training_records = relationship("TrainingRecord", back_populates="employee")
    ticket_records = relationship("TicketRecord", back_populates="employee")

"""
Manager-Department mapping model
"""
from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from skillstrack.db.base import Base


class ManagerDepartment(Base):
    __tablename__ = "manager_departments"

    id = Column(Integer, primary_key=True, index=True)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('manager_id', 'department_id', name='uq_manager_department'),
    )

    # Relationships
    manager = relationship("User", back_populates="managed_departments")
    department = relationship("Department", back_populates="manager_assignments")

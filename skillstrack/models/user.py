"""
User model

Users are the authenticated identities. A user may be linked to at most one
employee record (identity-to-employee mapping) and may manage any number of
departments through manager_departments.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from skillstrack.core.permissions import Role
from skillstrack.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.USER.value)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True, unique=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    # Relationships
    employee = relationship("Employee")
    managed_departments = relationship("ManagerDepartment", back_populates="manager", cascade="all")

    @property
    def managed_department_ids(self):
        return sorted(a.department_id for a in self.managed_departments)

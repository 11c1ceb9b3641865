"""
Department model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, text
from sqlalchemy.orm import relationship
from skillstrack.db.base import Base


class Department(Base):
    __tablename__ = "departments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    # Relationships
    manager_assignments = relationship(
        "ManagerDepartment", back_populates="department", cascade="all"
    )

    @property
    def manager_ids(self):
        return sorted(a.manager_id for a in self.manager_assignments)

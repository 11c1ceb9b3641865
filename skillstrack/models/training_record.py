"""
Training record model
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from skillstrack.db.base import Base


class TrainingRecord(Base):
    __tablename__ = "training_records"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    training_name = Column(String, nullable=False)
    date_completed = Column(Date, nullable=False)
    trainer = Column(String, nullable=True)
    # Relative to UPLOAD_DIR, always under "training/"
    image_path = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    employee = relationship("Employee", back_populates="training_records")

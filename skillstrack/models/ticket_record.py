"""
Ticket (licence) record model
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from skillstrack.db.base import Base


class TicketRecord(Base):
    __tablename__ = "ticket_records"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    ticket_name = Column(String, nullable=False)
    licence_number = Column(String, nullable=True)
    date_issued = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=True)
    # Relative to UPLOAD_DIR, always under "tickets/"
    image_path = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    employee = relationship("Employee", back_populates="ticket_records")

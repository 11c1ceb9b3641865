"""
Database models
"""
from skillstrack.models.location import Location
from skillstrack.models.department import Department
from skillstrack.models.employee import Employee
from skillstrack.models.user import User
from skillstrack.models.manager_department import ManagerDepartment
from skillstrack.models.training_record import TrainingRecord
from skillstrack.models.ticket_record import TicketRecord
from skillstrack.models.history import HistoryRecord, EntityKind, HistoryAction

__all__ = [
    "Location",
    "Department",
    "Employee",
    "User",
    "ManagerDepartment",
    "TrainingRecord",
    "TicketRecord",
    "HistoryRecord",
    "EntityKind",
    "HistoryAction",
]

"""
Organizational graph accessor - read-only view of manager/department/employee links
"""
from typing import Optional, Set
from sqlalchemy.orm import Session
from skillstrack.core.exceptions import EmployeeNotFoundError
from skillstrack.models.employee import Employee
from skillstrack.models.manager_department import ManagerDepartment
from skillstrack.models.user import User


class OrgGraphAccessor:
    """
    Queries the persistence layer on every call. Nothing is cached, so a
    change to a management assignment affects the very next access decision.
    """

    def __init__(self, db: Session):
        self.db = db

    def department_of(self, employee_id: int) -> Optional[int]:
        """
        Department of an employee

        Returns:
            Department id, or None for an unassigned employee

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        row = self.db.query(Employee.department_id).filter(Employee.id == employee_id).first()
        if row is None:
            raise EmployeeNotFoundError(employee_id)
        return row.department_id

    def managers_of(self, department_id: int) -> Set[int]:
        """User ids of every manager of a department"""
        rows = self.db.query(ManagerDepartment.manager_id).filter(
            ManagerDepartment.department_id == department_id
        ).all()
        return {r.manager_id for r in rows}

    def employee_for_user(self, user_id: int) -> Optional[int]:
        """Employee record linked to a user, if any"""
        row = self.db.query(User.employee_id).filter(User.id == user_id).first()
        return row.employee_id if row else None

    def managed_department_ids(self, user_id: int) -> Set[int]:
        """Departments a user manages"""
        rows = self.db.query(ManagerDepartment.department_id).filter(
            ManagerDepartment.manager_id == user_id
        ).all()
        return {r.department_id for r in rows}

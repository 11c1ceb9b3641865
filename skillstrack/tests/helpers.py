"""
Shared test helpers
"""
from skillstrack.core.security import create_access_token
from skillstrack.models.manager_department import ManagerDepartment


def assign(db, user, department):
    """Make user a manager of department"""
    db.add(ManagerDepartment(manager_id=user.id, department_id=department.id))
    db.commit()


def auth_headers(user):
    """Bearer header for a user"""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}

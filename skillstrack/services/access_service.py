"""
Access resolver - decides whether an actor may touch an employee's data

Single decision point for every employee-scoped gateway (history, images,
record mutations). Access is denied unless a rule below grants it.
"""
import logging
from typing import Optional, Protocol, Set, Union
from skillstrack.core.exceptions import AccessDeniedError
from skillstrack.core.permissions import Capability, Role, capabilities_for

logger = logging.getLogger(__name__)


class OrgGraph(Protocol):
    def department_of(self, employee_id: int) -> Optional[int]: ...

    def managers_of(self, department_id: int) -> Set[int]: ...

    def employee_for_user(self, user_id: int) -> Optional[int]: ...


def can_access_employee(
    org: OrgGraph,
    actor_id: int,
    actor_role: Union[Role, str],
    employee_id: int
) -> bool:
    """
    Decide whether an actor may access an employee's data

    Args:
        org: Organizational graph accessor
        actor_id: Authenticated user id
        actor_role: Role of the actor
        employee_id: Target employee

    Returns:
        True if access is granted, False otherwise

    Raises:
        EmployeeNotFoundError: Target does not exist (non-admin actors only)
        UnknownRoleError: actor_role is not a recognized role
    """
    capabilities = capabilities_for(actor_role)

    if Capability.EMPLOYEE_VIEW_ALL in capabilities:
        return True

    department_id = org.department_of(employee_id)
    if department_id is None:
        # Unassigned employees fail closed for every non-admin role
        return False

    if Capability.EMPLOYEE_VIEW_DEPARTMENT in capabilities:
        return actor_id in org.managers_of(department_id)

    if Capability.EMPLOYEE_VIEW_SELF in capabilities:
        own_employee_id = org.employee_for_user(actor_id)
        return own_employee_id is not None and own_employee_id == employee_id

    return False


def ensure_employee_access(
    org: OrgGraph,
    actor_id: int,
    actor_role: Union[Role, str],
    employee_id: int
) -> None:
    """
    Raise unless the actor may access the employee

    Raises:
        AccessDeniedError: Policy denies access
        EmployeeNotFoundError: Target does not exist
    """
    if not can_access_employee(org, actor_id, actor_role, employee_id):
        logger.info("Access denied: actor=%s role=%s employee=%s", actor_id, actor_role, employee_id)
        raise AccessDeniedError(actor_id, f"employee:{employee_id}")


def can_assign_to_department(
    org: OrgGraph,
    actor_id: int,
    actor_role: Union[Role, str],
    department_id: Optional[int]
) -> bool:
    """
    Decide whether an actor may place an employee into a department

    Managers may only move employees into departments they manage; clearing
    the department is reserved for employee.viewAll.
    """
    capabilities = capabilities_for(actor_role)

    if Capability.EMPLOYEE_VIEW_ALL in capabilities:
        return True
    if department_id is None:
        return False
    if Capability.EMPLOYEE_VIEW_DEPARTMENT in capabilities:
        return actor_id in org.managers_of(department_id)
    return False


def ensure_department_assignment(
    org: OrgGraph,
    actor_id: int,
    actor_role: Union[Role, str],
    department_id: Optional[int]
) -> None:
    """
    Raises:
        AccessDeniedError: Actor may not assign employees to department_id
    """
    if not can_assign_to_department(org, actor_id, actor_role, department_id):
        logger.info("Assignment denied: actor=%s role=%s department=%s", actor_id, actor_role, department_id)
        raise AccessDeniedError(actor_id, f"department:{department_id}")

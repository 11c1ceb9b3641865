"""
Role and capability model

Static, immutable mapping from each Role to the capabilities it grants.
Every authorization gate in the application goes through this module or the
access resolver built on top of it; no code compares role names directly.
"""
import enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Union

from skillstrack.core.exceptions import UnknownRoleError


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    DEPARTMENT_MANAGER = "DEPARTMENT_MANAGER"
    FIRE_WARDEN = "FIRE_WARDEN"
    EMPLOYEE_VIEWER = "EMPLOYEE_VIEWER"
    USER = "USER"


class Capability(str, enum.Enum):
    EMPLOYEE_VIEW_SELF = "employee.viewSelf"
    EMPLOYEE_VIEW_DEPARTMENT = "employee.viewDepartment"
    EMPLOYEE_VIEW_ALL = "employee.viewAll"
    EMPLOYEE_CREATE = "employee.create"
    EMPLOYEE_EDIT = "employee.edit"
    EMPLOYEE_DELETE = "employee.delete"
    DEPARTMENT_VIEW = "department.view"
    DEPARTMENT_CREATE = "department.create"
    DEPARTMENT_EDIT = "department.edit"
    DEPARTMENT_MANAGE = "department.manage"
    DEPARTMENT_VIEW_ALL = "department.viewAll"
    DEPARTMENT_DELETE = "department.delete"
    USER_MANAGE = "user.manage"


# Self-only roles share one grant; fire wardens do not get employee.viewAll
_SELF_ONLY = frozenset({
    Capability.EMPLOYEE_VIEW_SELF,
    Capability.DEPARTMENT_VIEW,
})

ROLE_CAPABILITIES: Mapping[Role, FrozenSet[Capability]] = MappingProxyType({
    Role.ADMIN: frozenset(Capability),
    Role.DEPARTMENT_MANAGER: frozenset({
        Capability.EMPLOYEE_VIEW_SELF,
        Capability.EMPLOYEE_VIEW_DEPARTMENT,
        Capability.EMPLOYEE_EDIT,
        Capability.DEPARTMENT_VIEW,
        Capability.DEPARTMENT_MANAGE,
    }),
    Role.FIRE_WARDEN: _SELF_ONLY,
    Role.EMPLOYEE_VIEWER: _SELF_ONLY,
    Role.USER: _SELF_ONLY,
})


def parse_role(role: Union[Role, str]) -> Role:
    """
    Coerce a role value coming from session or database data into Role

    Raises:
        UnknownRoleError: If the value is not a member of Role
    """
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        raise UnknownRoleError(role)


def capabilities_for(role: Union[Role, str]) -> FrozenSet[Capability]:
    """
    Return the capability set granted to a role

    Args:
        role: Role enum member or its string value

    Returns:
        Immutable set of capabilities

    Raises:
        UnknownRoleError: If role is not recognized
    """
    # Roles without an explicit grant get nothing
    return ROLE_CAPABILITIES.get(parse_role(role), frozenset())


def has_capability(role: Union[Role, str], capability: Capability) -> bool:
    """Check whether a role grants a capability"""
    return capability in capabilities_for(role)

"""
Domain exceptions for SkillsTrack Backend

Services raise these instead of HTTPException so the access resolver and the
history store stay independent of the web layer. Handlers in
skillstrack.core.errors translate them into HTTP responses.
"""
from typing import Any, Dict, Optional


class SkillsTrackError(Exception):
    """
    Base exception for all domain errors.

    Attributes:
        message: Internal description (logged, not shown to end users)
        error_code: Machine-readable code used by the HTTP handlers
        details: Additional context
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)


class AccessDeniedError(SkillsTrackError):
    """Policy says no."""

    def __init__(self, actor_id: Optional[int] = None, resource: Optional[str] = None):
        super().__init__(
            f"Actor {actor_id} denied access to {resource}",
            "ACCESS_DENIED",
            {"actor_id": actor_id, "resource": resource},
        )


class EmployeeNotFoundError(SkillsTrackError):
    """The referenced employee does not exist."""

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(
            f"Employee {employee_id} not found",
            "EMPLOYEE_NOT_FOUND",
            {"employee_id": employee_id},
        )


class UnknownRoleError(SkillsTrackError):
    """A role value outside the closed Role enum reached the permission model."""

    def __init__(self, role: Any):
        super().__init__(
            f"Unknown role: {role!r}",
            "UNKNOWN_ROLE",
            {"role": str(role)},
        )


class StoreError(SkillsTrackError):
    """Underlying storage failure. Never retried by the service layer."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Storage failure during {operation}: {reason}",
            "STORE_ERROR",
            {"operation": operation},
        )


class AppendOnlyViolationError(SkillsTrackError):
    """Attempt to modify or delete a committed history record."""

    def __init__(self, history_id: Optional[int], operation: str):
        super().__init__(
            f"History record {history_id} is append-only; {operation} rejected",
            "APPEND_ONLY_VIOLATION",
            {"history_id": history_id, "operation": operation},
        )


class ResourceNotFoundError(SkillsTrackError):
    """A non-employee resource (department, record, image, file) does not exist."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} {identifier} not found",
            f"{resource.upper()}_NOT_FOUND",
            {"resource": resource, "identifier": str(identifier)},
        )


class InvalidFilePathError(SkillsTrackError):
    """Requested file path contains traversal sequences or escapes the storage root."""

    def __init__(self, file_path: str):
        super().__init__(
            f"Invalid file path: {file_path}",
            "INVALID_FILE_PATH",
            {"file_path": file_path},
        )


class DomainValidationError(SkillsTrackError):
    """Request is well-formed but violates a business rule."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class ConflictError(SkillsTrackError):
    """Request conflicts with current state, e.g. an employee already linked to another user."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFLICT", details)

"""
Central error handling for SkillsTrack Backend

Domain exceptions carry no user-facing text; the messages shown to clients
are chosen here.
"""
import logging
import traceback
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from skillstrack.core.config import settings
from skillstrack.core.exceptions import (
    AccessDeniedError,
    AppendOnlyViolationError,
    ConflictError,
    DomainValidationError,
    EmployeeNotFoundError,
    InvalidFilePathError,
    ResourceNotFoundError,
    SkillsTrackError,
    StoreError,
    UnknownRoleError,
)

logger = logging.getLogger(__name__)

# Most specific classes first
_DOMAIN_RESPONSES = [
    (AccessDeniedError, status.HTTP_403_FORBIDDEN, "Not authorised to access this resource"),
    (EmployeeNotFoundError, status.HTTP_404_NOT_FOUND, "Employee not found"),
    (InvalidFilePathError, status.HTTP_400_BAD_REQUEST, "Invalid file path"),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND, None),
    (DomainValidationError, status.HTTP_400_BAD_REQUEST, None),
    (ConflictError, status.HTTP_409_CONFLICT, None),
    (StoreError, status.HTTP_503_SERVICE_UNAVAILABLE, "Storage temporarily unavailable"),
    (UnknownRoleError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
    (AppendOnlyViolationError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
]

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
    "Access-Control-Allow-Headers": "*",
}


def _error_body(status_code: int, detail, request: Request, **extra) -> dict:
    body = {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        "path": str(request.url.path)
    }
    body.update(extra)
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail, request),
        headers={**_CORS_HEADERS, **(exc.headers or {})}
    )


async def domain_exception_handler(request: Request, exc: SkillsTrackError) -> JSONResponse:
    """
    Translate domain exceptions into HTTP responses

    403 and 404 stay distinct. Unknown roles and append-only violations are
    programming or data-integrity faults: logged at ERROR, returned as 500.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"
    for exc_type, code, message in _DOMAIN_RESPONSES:
        if isinstance(exc, exc_type):
            status_code = code
            detail = message if message is not None else exc.message
            break

    if status_code >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)

    return JSONResponse(
        status_code=status_code,
        content=_error_body(status_code, detail, request, code=exc.error_code),
        headers=_CORS_HEADERS
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(422, "Validation error: Invalid request data", request)
        )

    # Sanitize for JSON: e.g. ctx.error ValueError -> str
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(422, "Validation error", request, errors=errors)
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(500, "Internal server error", request),
            headers=_CORS_HEADERS
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            500,
            str(exc),
            request,
            traceback=traceback.format_exc() if settings.APP_ENV == "local" else None
        ),
        headers=_CORS_HEADERS
    )

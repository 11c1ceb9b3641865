"""
Image service - resolves protected ticket/training images for an actor
"""
import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from skillstrack.core.config import settings
from skillstrack.core.exceptions import AccessDeniedError, InvalidFilePathError, ResourceNotFoundError
from skillstrack.models.ticket_record import TicketRecord
from skillstrack.models.training_record import TrainingRecord
from skillstrack.schemas.auth import Actor
from skillstrack.services.access_service import ensure_employee_access
from skillstrack.services.org_graph import OrgGraphAccessor

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
}

_OWNERS = {
    "tickets": TicketRecord,
    "training": TrainingRecord,
}


def validate_file_path(file_path: str, storage_root: Path) -> Path:
    """
    Reject traversal before any lookup and resolve under the storage root

    Raises:
        InvalidFilePathError: Path has '..', backslashes, is absolute, or
            resolves outside storage_root
    """
    if not file_path or ".." in file_path or "\\" in file_path or "\x00" in file_path:
        raise InvalidFilePathError(file_path)
    if PurePosixPath(file_path).is_absolute():
        raise InvalidFilePathError(file_path)

    root = storage_root.resolve()
    full_path = (root / file_path).resolve()
    try:
        full_path.relative_to(root)
    except ValueError:
        raise InvalidFilePathError(file_path)
    return full_path


def get_image(
    db: Session,
    file_path: str,
    actor: Actor,
    storage_root: Optional[Path] = None
) -> Tuple[Path, str]:
    """
    Authorize and locate a stored image

    Args:
        db: Database session
        file_path: Path relative to the storage root, e.g. "tickets/12/front.jpg"
        actor: Requesting identity
        storage_root: Defaults to settings.UPLOAD_DIR

    Returns:
        (absolute file path, content type)

    Raises:
        InvalidFilePathError: Traversal attempt
        AccessDeniedError: Unknown image prefix, or the resolver denies access
        ResourceNotFoundError: No record references the path, or file missing
        EmployeeNotFoundError: Owning employee does not exist
    """
    full_path = validate_file_path(file_path, storage_root or Path(settings.UPLOAD_DIR))

    prefix = file_path.split("/", 1)[0]
    model = _OWNERS.get(prefix)
    if model is None:
        logger.info("Rejected image request outside protected prefixes: %s", file_path)
        raise AccessDeniedError(actor.id, f"image:{file_path}")

    record = db.query(model).filter(model.image_path == file_path).first()
    if record is None:
        raise ResourceNotFoundError("Image", file_path)

    ensure_employee_access(OrgGraphAccessor(db), actor.id, actor.role, record.employee_id)

    if not full_path.is_file():
        logger.warning("Image %s referenced by %s %s is missing on disk", file_path, model.__name__, record.id)
        raise ResourceNotFoundError("File", file_path)

    content_type = CONTENT_TYPES.get(full_path.suffix.lower(), "application/octet-stream")
    return full_path, content_type

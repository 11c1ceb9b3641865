"""
SkillsTrack Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from skillstrack.api.router import api_router
from skillstrack.core.config import settings
from skillstrack.core.errors import (
    domain_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from skillstrack.core.exceptions import SkillsTrackError
from skillstrack.core.logging import setup_logging
from skillstrack.core.permissions import Role
from skillstrack.db.session import SessionLocal
from skillstrack.models.user import User

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
        if parsed.scheme.startswith("sqlite"):
            return url
        if parsed.password:
            netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
            if parsed.port:
                netloc += f":{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
    except ValueError:
        return "***"
    return url


# Create FastAPI app
app = FastAPI(
    title="SkillsTrack Backend",
    description="Training and licence management: access control and audit history",
    version=settings.VERSION or "1.0.0"
)

# Configure CORS - must be before other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(SkillsTrackError, domain_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api/v1
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_log_config() -> None:
    """Log DATABASE_URL at startup so it can be verified against Alembic."""
    logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))


@app.on_event("startup")
def bootstrap_initial_admin() -> None:
    """
    Create the initial ADMIN user when none exists and INITIAL_ADMIN_EMAIL is set.
    """
    if not settings.INITIAL_ADMIN_EMAIL:
        return

    db = SessionLocal()
    try:
        if db.query(User).filter(User.role == Role.ADMIN.value).first():
            logger.info("Admin user already exists, skipping initial bootstrap")
            return

        existing = db.query(User).filter(User.email == settings.INITIAL_ADMIN_EMAIL).first()
        if existing:
            existing.role = Role.ADMIN.value
            logger.info("Promoted %s to ADMIN", settings.INITIAL_ADMIN_EMAIL)
        else:
            db.add(User(
                email=settings.INITIAL_ADMIN_EMAIL,
                name="System Administrator",
                role=Role.ADMIN.value,
                active=True,
            ))
            logger.info("Initial admin user created: %s", settings.INITIAL_ADMIN_EMAIL)
        db.commit()
    except OperationalError as e:
        db.rollback()
        if "no such table" in str(e).lower():
            logger.warning("Database tables not ready yet, skipping initial bootstrap")
        else:
            logger.error("Database error during admin bootstrap: %s", e)
    finally:
        db.close()

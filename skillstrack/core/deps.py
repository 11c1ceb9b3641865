"""
Dependencies and guards for FastAPI endpoints
"""
from typing import Generator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from skillstrack.core.exceptions import AccessDeniedError
from skillstrack.core.permissions import Capability, capabilities_for, parse_role
from skillstrack.core.security import decode_token
from skillstrack.db.session import SessionLocal
from skillstrack.models.user import User
from skillstrack.schemas.auth import Actor
from skillstrack.services.org_graph import OrgGraphAccessor


security = HTTPBearer()


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from JWT token
    """
    token = credentials.credentials

    try:
        payload = decode_token(token)
        sub_value = payload.get("sub")
        if sub_value is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )
        # JWT 'sub' is a string; user ids are integers
        user_id: int = int(sub_value)
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    return user


def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    """
    Actor for the request. The role always comes from the user row, never
    from client-side state.
    """
    return Actor(id=user.id, role=parse_role(user.role))


def get_org_graph(db: Session = Depends(get_db)) -> OrgGraphAccessor:
    """Dependency for the organizational graph accessor"""
    return OrgGraphAccessor(db)


def require_capabilities(*required: Capability):
    """
    Dependency factory for capability-based access control

    Usage:
        @router.post("")
        async def create(actor: Actor = Depends(require_capabilities(Capability.DEPARTMENT_CREATE))):
            ...
    """
    def capability_checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        granted = capabilities_for(actor.role)
        missing = [c.value for c in required if c not in granted]
        if missing:
            raise AccessDeniedError(actor.id, ",".join(missing))
        return actor
    return capability_checker

"""
Pytest configuration and fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_ENV", "local")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine
from skillstrack.main import app
from skillstrack.db.base import Base
from skillstrack.core.deps import get_db
from skillstrack.core.permissions import Role

# Import all models to ensure they're registered with Base.metadata
from skillstrack.models import (
    Department,
    Employee,
    Location,
    ManagerDepartment,
    User,
)  # noqa


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def location(db):
    loc = Location(name="Bundamba", state="QLD")
    db.add(loc)
    db.commit()
    db.refresh(loc)
    return loc


@pytest.fixture
def logistics(db):
    dept = Department(name="Logistics", active=True)
    db.add(dept)
    db.commit()
    db.refresh(dept)
    return dept


@pytest.fixture
def quality(db):
    dept = Department(name="Quality", active=True)
    db.add(dept)
    db.commit()
    db.refresh(dept)
    return dept


@pytest.fixture
def make_employee(db, location):
    """Factory for employees"""
    def _make(first_name="Alex", last_name="Smith", department=None):
        emp = Employee(
            first_name=first_name,
            last_name=last_name,
            department_id=department.id if department is not None else None,
            location_id=location.id,
        )
        db.add(emp)
        db.commit()
        db.refresh(emp)
        return emp
    return _make


@pytest.fixture
def make_user(db):
    """Factory for users"""
    counter = {"n": 0}

    def _make(role=Role.USER, employee=None, name=None):
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            name=name or f"User {counter['n']}",
            role=role.value if isinstance(role, Role) else role,
            employee_id=employee.id if employee is not None else None,
            active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, name="Admin")


@pytest.fixture
def manager(make_user):
    return make_user(Role.DEPARTMENT_MANAGER, name="Manager")


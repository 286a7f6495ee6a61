"""
Shared fixtures for the SchoolBase test suite.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from schoolbase.core.auth import (
    PlatformAdminPrincipal,
    TenantContext,
    get_platform_admin,
    get_school_admin_context,
)
from schoolbase.core.database import get_db
from schoolbase.core.rate_limit import reset_memory_store
from schoolbase.main import create_app
from schoolbase.modules.curriculum.models import ClassList, Stream
from schoolbase.modules.students.models import Gender, Student, StudentStatus
from schoolbase.modules.users.models import User

NOW = datetime(2025, 6, 1, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Every test starts with empty in-memory login counters."""
    reset_memory_store()
    yield
    reset_memory_store()


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def tenant():
    return TenantContext(school_id=1, school_code="GREEN", school_name="Green Valley School")


@pytest.fixture
def sample_template():
    template = MagicMock(spec=ClassList)
    template.id = 11
    template.class_name = "Class 10"
    template.class_number = 10
    template.stream = None
    template.code = "10"
    return template


@pytest.fixture
def science_template():
    template = MagicMock(spec=ClassList)
    template.id = 13
    template.class_name = "Class 11 Science"
    template.class_number = 11
    template.stream = Stream.SCIENCE
    template.code = "11-SCIENCE"
    return template


@pytest.fixture
def sample_user():
    user = MagicMock(spec=User)
    user.id = 7
    user.phone = "9876543210"
    user.password_hash = "hashed"
    user.created_at = NOW
    return user


def make_student(**overrides):
    """Build a Student-shaped mock; keyword arguments override defaults."""
    student = MagicMock(spec=Student)
    values = {
        "id": 21,
        "school_id": 1,
        "user_id": 7,
        "name": "Asha Rao",
        "gender": Gender.FEMALE,
        "email": "asha@example.com",
        "address": None,
        "date_of_birth": None,
        "father_name": None,
        "mother_name": None,
        "category": None,
        "aadhar_number": None,
        "enrollment_date": NOW,
        "status": StudentStatus.ACTIVE,
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    for key, value in values.items():
        setattr(student, key, value)
    return student


@pytest.fixture
def sample_student():
    return make_student()


@pytest.fixture
def class_row():
    """A class joined with its template, as the class repository returns it."""
    return {
        "id": 31,
        "class_list_id": 11,
        "class_name": "Class 10",
        "class_number": 10,
        "stream": None,
        "class_code": "10",
        "session": "2024-25",
        "section": "A",
        "created_at": NOW,
        "updated_at": NOW,
    }


@pytest.fixture
def enrollment_row():
    """An enrollment joined with student and class fields."""
    return {
        "id": 41,
        "student_id": 21,
        "student_name": "Asha Rao",
        "student_email": "asha@example.com",
        "student_status": StudentStatus.ACTIVE,
        "class_id": 31,
        "class_name": "Class 10",
        "class_number": 10,
        "section": "A",
        "session": "2024-25",
        "stream": None,
        "enrollment_date": NOW,
        "is_active": True,
        "created_at": NOW,
    }


@pytest.fixture
def student_enrollment_row():
    """Compact enrollment row embedded in student payloads."""
    return {
        "enrollment_id": 41,
        "student_id": 21,
        "class_id": 31,
        "class_name": "Class 10",
        "class_number": 10,
        "stream": None,
        "section": "A",
        "session": "2024-25",
        "enrollment_date": NOW,
        "is_active": True,
    }


@pytest.fixture
def app(mock_db, tenant):
    """Application with the database and auth dependencies replaced."""
    application = create_app(database=MagicMock())

    async def override_db():
        yield mock_db

    application.dependency_overrides[get_db] = override_db
    application.dependency_overrides[get_school_admin_context] = lambda: tenant
    application.dependency_overrides[get_platform_admin] = lambda: PlatformAdminPrincipal(username="root")
    return application


@pytest.fixture
def client(app):
    """Test client that does not run the lifespan (no real connections)."""
    return TestClient(app)


@pytest.fixture
def student_factory():
    return make_student


@pytest.fixture
def anonymous_client(mock_db):
    """Test client with the real auth gateway in place."""
    application = create_app(database=MagicMock())

    async def override_db():
        yield mock_db

    application.dependency_overrides[get_db] = override_db
    return TestClient(application)

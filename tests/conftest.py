"""Shared pytest fixtures for the test suite.

The database is a throwaway SQLite file; DATABASE_URL must be set before
anything under `portal` is imported, because the engine is built at import.

Fixture overview
----------------
reset_schema   - drops and recreates every table around each test (autouse)
client         - FastAPI TestClient bound to the app
storage        - the persistence gateway
make_user      - creates a user with a role and returns (user, auth headers)
make_university / make_program / make_application - catalogue + application rows
"""

from __future__ import annotations

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="portal-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'portal.db')}"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import itertools  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from portal.core.auth import create_access_token  # noqa: E402
from portal.db.database import engine  # noqa: E402
from portal.main import app  # noqa: E402
from portal.models import Base  # noqa: E402
from portal.services.storage_service import get_storage  # noqa: E402

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def reset_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def storage():
    return get_storage()


def auth_headers(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}


@pytest.fixture
def make_user(storage):
    """Create a user without a password; log in by token only."""

    def _make(role: str = "student", **values):
        n = next(_counter)
        user = storage.create_user({
            "email": f"user{n}@example.com",
            "first_name": f"User{n}",
            "role": role,
            **values,
        })
        return user, auth_headers(user.id)

    return _make


@pytest.fixture
def make_university(storage, make_user):
    def _make(name: str = "Test University", country: str = "Canada", **values):
        owner, _ = make_user("university")
        return storage.create_university_profile({
            "user_id": owner.id, "university_name": name, "country": country, **values
        })

    return _make


@pytest.fixture
def make_program(storage):
    def _make(university, field: str = "Computer Science", tuition_fee: int = 30000, **values):
        return storage.create_university_program({
            "university_id": university.id,
            "program_name": values.pop("program_name", f"{field} BSc"),
            "degree": values.pop("degree", "Bachelor"),
            "field": field,
            "tuition_fee": tuition_fee,
            **values,
        })

    return _make


@pytest.fixture
def make_application(storage, make_university, make_program):
    """Application for `student`; builds a university/program unless `program` is given."""

    def _make(student, status: str = "draft", agent=None, program=None, **values):
        if program is None:
            program = make_program(make_university())
        return storage.create_application({
            "student_id": student.id,
            "agent_id": agent.id if agent is not None else None,
            "university_id": program.university_id,
            "program_id": program.id,
            "status": status,
            **values,
        })

    return _make

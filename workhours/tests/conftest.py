import os
import tempfile
from pathlib import Path

_default_test_secret = "test-jwt-secret-for-pytest-only-0000000000000000"
if len(os.environ.get("JWT_SECRET", "")) < 32:
    os.environ["JWT_SECRET"] = _default_test_secret

os.environ["ENV"] = "test"

_test_db_dir = tempfile.mkdtemp(prefix="workhours-tests-")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", f"sqlite:///{Path(_test_db_dir) / 'workhours.db'}")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

import pytest

from workhours import database
from workhours.core.clock import FixedClock, set_clock
from workhours.models import Employee, Project, WorkType
from workhours.services.auth_service import create_access_token


@pytest.fixture(scope="session", autouse=True)
def _prepare_test_database() -> None:
    database.configure_database()
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.Base.metadata.drop_all(bind=database.engine)


@pytest.fixture(scope="function", autouse=True)
def _truncate_tables_between_tests():
    yield

    with database.engine.begin() as conn:
        for table in reversed(database.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture(autouse=True)
def _reset_clock():
    yield
    set_clock(None)


@pytest.fixture
def db():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def fixed_clock():
    def _factory(value):
        clock = FixedClock(value)
        set_clock(clock)
        return clock

    return _factory


@pytest.fixture
def employee_factory():
    def _factory(name: str = "Employee", employee_id: int | None = None) -> Employee:
        session = database.SessionLocal()
        try:
            row = Employee(id=employee_id, name=name, is_active=True)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row
        finally:
            session.close()

    return _factory


@pytest.fixture
def work_type_factory():
    def _factory(name: str = "Office", description: str | None = None) -> WorkType:
        session = database.SessionLocal()
        try:
            row = WorkType(name=name, description=description)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row
        finally:
            session.close()

    return _factory


@pytest.fixture
def project_factory():
    def _factory(name: str = "Project") -> Project:
        session = database.SessionLocal()
        try:
            row = Project(name=name, is_active=True)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row
        finally:
            session.close()

    return _factory


@pytest.fixture
def auth_headers():
    def _headers(employee_id: int, role: str = "EMPLOYEE") -> dict:
        token = create_access_token(employee_id=employee_id, role=role)
        return {"Authorization": f"Bearer {token}"}

    return _headers

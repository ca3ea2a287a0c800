# /tests/conftest.py

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.database import get_db
from app.main import app
from app.models import class_model, session_model
from app.models.registration_model import StudentInfo
from app.services import class_service
from app.services.database_service import DatabaseService

# Services take `now` explicitly; tests pin it to a Monday morning.
NOW = datetime(2030, 3, 4, 9, 0)  # a Monday


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database per test, shared across threads."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def db_service(db_session):
    """Provides a real DatabaseService on top of the test session."""
    return DatabaseService(db_session=db_session)


@pytest.fixture
def client(db_session):
    """
    A TestClient whose requests use the test session. The client is not used
    as a context manager, so the app's startup hook never touches the real database.
    """
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def spring_session(db_service):
    return class_service.create_session(
        session_model.SessionCreate(
            name="Spring", start=datetime(2030, 3, 1), end=datetime(2030, 5, 31, 23, 59)
        ),
        db_service,
    )


@pytest.fixture
def make_class(db_service):
    """Factory for classes; keyword arguments override the defaults."""
    def _make(**overrides):
        data = {"title": "Vinyasa Flow", "capacity": 2}
        data.update(overrides)
        return class_service.add_class(class_model.ClassCreate(**data), db_service)
    return _make


@pytest.fixture
def make_student():
    def _make(student_id: str, first_name: str = "Ada", last_name: str = "Lovelace"):
        return StudentInfo(
            student_id=student_id,
            first_name=first_name,
            last_name=last_name,
            email=f"{student_id}@example.com",
        )
    return _make


@pytest.fixture
def now():
    return NOW

"""
Intern Registry - Test Configuration and Fixtures
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from intern_registry.config import Settings
from intern_registry.domain.models.intern import Intern
from intern_registry.domain.models.user import ROLE_HR, ROLE_STAFF, User
from intern_registry.domain.schemas.auth import Identity
from intern_registry.infrastructure.database import Base, create_session_factory
from intern_registry.infrastructure.repositories.intern_repository import SQLAlchemyInternRepository
from intern_registry.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from intern_registry.main import create_app
from tests.factories import FakeBlobStore, FakeNotifier


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        ENVIRONMENT="test",
        FRONTEND_URL="http://frontend.test",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        NOTIFIER_BACKEND="log",
        BOOTSTRAP_HR_EMAIL="",
    )


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    session = create_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def user_repo(db_session) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db_session, User)


@pytest.fixture
def intern_repo(db_session) -> SQLAlchemyInternRepository:
    return SQLAlchemyInternRepository(db_session, Intern)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def staff_user(user_repo) -> User:
    return user_repo.add(User(email="it.staff@org.com", role=ROLE_STAFF, department="IT"))


@pytest.fixture
def other_staff_user(user_repo) -> User:
    return user_repo.add(User(email="finance.staff@org.com", role=ROLE_STAFF, department="Finance"))


@pytest.fixture
def hr_user(user_repo) -> User:
    return user_repo.add(User(email="hr@org.com", role=ROLE_HR, department="Human Resources"))


@pytest.fixture
def staff() -> Identity:
    return Identity(email="it.staff@org.com", role=ROLE_STAFF, department="IT")


@pytest.fixture
def other_staff() -> Identity:
    return Identity(email="finance.staff@org.com", role=ROLE_STAFF, department="Finance")


@pytest.fixture
def hr() -> Identity:
    return Identity(email="hr@org.com", role=ROLE_HR, department="Human Resources")


@pytest.fixture
def client(settings, engine, notifier, blob_store) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory database and fakes"""
    app = create_app(settings, engine=engine, notifier=notifier, blob_store=blob_store)
    with TestClient(app) as test_client:
        yield test_client



"""Pytest configuration and fixtures."""

import os

# Use test database - PostgreSQL when DATABASE_URL is provided, SQLite locally
if os.getenv("DATABASE_URL"):
    TEST_DATABASE_URL = os.environ["DATABASE_URL"].rsplit("/", 1)[0] + "/user_api_test"
else:
    TEST_DATABASE_URL = "sqlite:///./test.db"

TEST_JWT_SECRET = "test-secret-key"  # noqa: S105

# Settings are read once at import time, so configure them before importing the app
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from user_api.database import Base, get_db  # noqa: E402
from user_api.main import app  # noqa: E402
from user_api.schemas.user import UserCreate  # noqa: E402
from user_api.services.auth import AuthService  # noqa: E402
from user_api.services.passwords import PasswordHasher  # noqa: E402
from user_api.services.tokens import TokenService  # noqa: E402
from user_api.services.users import UserService  # noqa: E402

TEST_PASSWORD = "Password123"  # noqa: S105


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's id and email."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


connect_args = {"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {}
engine = create_engine(TEST_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in TEST_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(TEST_DATABASE_URL):
            create_database(TEST_DATABASE_URL)

    from user_api import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def session_factory():
    """Factory for sessions independent of the per-test session."""
    return TestingSessionLocal


@pytest.fixture
def password_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(secret=TEST_JWT_SECRET)


@pytest.fixture
def user_service(db, password_hasher):
    return UserService(db, password_hasher)


@pytest.fixture
def auth_service(user_service, password_hasher, token_service):
    return AuthService(user_service, password_hasher, token_service)


@pytest.fixture
def make_user(user_service):
    """Create users directly through the service."""

    def _make_user(name="John Doe", email="john@example.com", password=TEST_PASSWORD):
        return user_service.create_user(UserCreate(name=name, email=email, password=password))

    return _make_user


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Register a user and return auth headers with user info."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Test User", "email": "test@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    token = data["token"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )

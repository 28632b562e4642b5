"""User service tests."""

import threading

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from user_api.exceptions import UserAlreadyExistsError, UserNotFoundError, UserServiceError
from user_api.schemas.user import UserCreate, UserUpdate
from user_api.services.passwords import PasswordHasher
from user_api.services.users import UserService

TEST_PASSWORD = "Password123"  # noqa: S105


def test_create_user(make_user, password_hasher):
    """Test creating a user stores a lowercased email and a hash."""
    user = make_user(email="John@Example.com")
    assert user.id
    assert user.email == "john@example.com"
    assert user.password_hash != TEST_PASSWORD
    assert password_hasher.verify(TEST_PASSWORD, user.password_hash)
    assert user.created_at is not None
    assert user.updated_at is not None


def test_create_duplicate_email_case_insensitive(make_user):
    """Test a second user with the same email in another case is rejected."""
    make_user(email="john@example.com")
    with pytest.raises(UserAlreadyExistsError, match="john@example.com"):
        make_user(name="Other John", email="JOHN@example.com")


def test_create_race_falls_back_to_unique_constraint(make_user, user_service, monkeypatch):
    """Test a duplicate that slips past the pre-check still maps to UserAlreadyExistsError."""
    make_user()
    monkeypatch.setattr(user_service, "find_by_email", lambda email: None)
    with pytest.raises(UserAlreadyExistsError):
        make_user()
    # Session is usable again after the rollback
    monkeypatch.undo()
    assert user_service.find_by_email("john@example.com") is not None


def test_concurrent_registrations_yield_one_winner(session_factory):
    """Test two simultaneous creates with the same email: one success, one conflict."""
    barrier = threading.Barrier(2)
    outcomes = []
    lock = threading.Lock()
    data = UserCreate(name="John Doe", email="john@example.com", password=TEST_PASSWORD)

    def register():
        session = session_factory()
        try:
            service = UserService(session, PasswordHasher(rounds=4))
            barrier.wait()
            try:
                service.create_user(data)
                result = "created"
            except UserAlreadyExistsError:
                result = "exists"
            with lock:
                outcomes.append(result)
        finally:
            session.close()

    threads = [threading.Thread(target=register) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["created", "exists"]


def test_create_storage_failure(user_service, monkeypatch):
    """Test other storage failures are wrapped as UserServiceError."""
    cause = OperationalError("INSERT INTO users", {}, Exception("connection lost"))

    def fail():
        raise cause

    monkeypatch.setattr(user_service.db, "commit", fail)
    with pytest.raises(UserServiceError, match="Failed to create user") as exc_info:
        user_service.create_user(
            UserCreate(name="John Doe", email="john@example.com", password=TEST_PASSWORD)
        )
    assert exc_info.value.cause is cause


def test_find_by_email_is_case_insensitive(make_user, user_service):
    """Test email lookup lowercases first."""
    user = make_user()
    assert user_service.find_by_email("JOHN@EXAMPLE.COM").id == user.id


def test_find_missing_returns_none(user_service):
    """Test lookups return None rather than raising."""
    assert user_service.find_by_id("missing-id") is None
    assert user_service.find_by_email("nobody@example.com") is None


def test_list_users_newest_first(make_user, user_service):
    """Test listing orders by creation time, newest first."""
    first = make_user(name="First", email="first@example.com")
    second = make_user(name="Second", email="second@example.com")
    third = make_user(name="Third", email="third@example.com")

    users = user_service.list_users()
    assert [u.id for u in users] == [third.id, second.id, first.id]


def test_update_name_only(make_user, user_service):
    """Test partial update leaves other fields untouched."""
    user = make_user()
    old_hash = user.password_hash

    updated = user_service.update_user(user.id, UserUpdate(name="Jane Doe"))
    assert updated.name == "Jane Doe"
    assert updated.email == "john@example.com"
    assert updated.password_hash == old_hash


def test_update_to_own_email(make_user, user_service):
    """Test updating to the current email skips the conflict check."""
    user = make_user()
    updated = user_service.update_user(user.id, UserUpdate(email="JOHN@example.com"))
    assert updated.email == "john@example.com"


def test_update_email_conflict(make_user, user_service):
    """Test taking another user's email is rejected."""
    make_user(email="taken@example.com")
    user = make_user()
    with pytest.raises(UserAlreadyExistsError):
        user_service.update_user(user.id, UserUpdate(email="taken@example.com"))


def test_update_password_rehashes(make_user, user_service, password_hasher):
    """Test a new password is hashed before storing."""
    user = make_user()
    updated = user_service.update_user(user.id, UserUpdate(password="NewPassword456"))
    assert updated.password_hash != "NewPassword456"
    assert password_hasher.verify("NewPassword456", updated.password_hash)
    assert not password_hasher.verify(TEST_PASSWORD, updated.password_hash)


def test_update_missing_user(user_service):
    """Test updating a nonexistent user fails."""
    with pytest.raises(UserNotFoundError, match="missing-id"):
        user_service.update_user("missing-id", UserUpdate(name="Nobody"))


def test_update_requires_a_field():
    """Test an empty update is rejected by validation."""
    with pytest.raises(ValidationError, match="At least one field"):
        UserUpdate()


def test_delete_user(make_user, user_service):
    """Test deleting a user removes it."""
    user = make_user()
    user_service.delete_user(user.id)
    assert user_service.find_by_id(user.id) is None


def test_delete_twice(make_user, user_service):
    """Test the second delete reports not found."""
    user = make_user()
    user_service.delete_user(user.id)
    with pytest.raises(UserNotFoundError):
        user_service.delete_user(user.id)


def test_delete_missing_user(user_service):
    with pytest.raises(UserNotFoundError):
        user_service.delete_user("missing-id")

"""Password hashing tests."""

import pytest

from user_api.services.passwords import PasswordHasher


def test_hash_password(password_hasher):
    """Test hashing produces a salted bcrypt digest."""
    hashed = password_hasher.hash("Password123")
    assert hashed != "Password123"
    assert hashed.startswith("$2")
    # Salted: hashing twice gives different digests
    assert password_hasher.hash("Password123") != hashed


def test_hash_uses_configured_cost():
    """Test the cost factor ends up in the hash."""
    hashed = PasswordHasher(rounds=5).hash("Password123")
    assert "$05$" in hashed


@pytest.mark.parametrize("bad_input", ["", None, 123])
def test_hash_rejects_empty_or_non_string(password_hasher, bad_input):
    """Test hashing requires a non-empty string."""
    with pytest.raises(ValueError, match="non-empty string"):
        password_hasher.hash(bad_input)


def test_verify_password(password_hasher):
    """Test verifying correct and incorrect passwords."""
    hashed = password_hasher.hash("Password123")
    assert password_hasher.verify("Password123", hashed) is True
    assert password_hasher.verify("Password124", hashed) is False


def test_verify_rejects_empty_arguments(password_hasher):
    """Test verify raises when either argument is empty."""
    hashed = password_hasher.hash("Password123")
    with pytest.raises(ValueError, match="Password must be"):
        password_hasher.verify("", hashed)
    with pytest.raises(ValueError, match="Hashed password must be"):
        password_hasher.verify("Password123", "")


@pytest.mark.parametrize("malformed", ["not-a-hash", "$2b$04$tooshort"])
def test_verify_malformed_hash_returns_false(password_hasher, malformed):
    """Test a malformed hash is a mismatch rather than an error."""
    assert password_hasher.verify("Password123", malformed) is False


def test_bcrypt_backend_is_supported():
    """Test the installed bcrypt still exposes the version module passlib reads."""
    import bcrypt

    assert hasattr(bcrypt, "__about__")

"""Password hashing with bcrypt."""

from passlib.context import CryptContext


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """Hash a password."""
        if not password or not isinstance(password, str):
            raise ValueError("Password must be a non-empty string")
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash.

        A hash that cannot be parsed counts as a mismatch, not an error.
        """
        if not password or not isinstance(password, str):
            raise ValueError("Password must be a non-empty string")
        if not hashed_password or not isinstance(hashed_password, str):
            raise ValueError("Hashed password must be a non-empty string")
        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError):
            return False

"""Domain and API error types.

Services raise the ``DomainError`` subclasses below; the HTTP layer maps each
class to a status code and a stable error code (see ``user_api.api.errors``).
"""

from typing import Any


class DomainError(Exception):
    """Base class for application-defined failures."""


class UserNotFoundError(DomainError):
    """Target user does not exist."""

    def __init__(self, identifier: str):
        super().__init__(f"User not found: {identifier}")
        self.identifier = identifier


class UserAlreadyExistsError(DomainError):
    """Email is already taken by another user."""

    def __init__(self, email: str):
        super().__init__(f"User with email {email} already exists")
        self.email = email


class UserServiceError(DomainError):
    """Infrastructure failure in user data access."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class InvalidCredentialsError(DomainError):
    """Login failed. Raised identically for unknown email and wrong password."""

    def __init__(self):
        super().__init__("Invalid email or password")


class AuthServiceError(DomainError):
    """Infrastructure failure while composing authentication flows."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class TokenError(DomainError):
    """Base class for bearer token failures."""


class TokenExpiredError(TokenError):
    """Token signature is valid but its expiry has passed."""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Token is malformed or its signature does not verify."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenPayloadError(TokenError):
    """Token payload lacks userId or email."""

    def __init__(self, message: str = "Invalid token payload"):
        super().__init__(message)


class TokenConfigurationError(TokenError):
    """No signing secret is configured."""

    def __init__(self, message: str = "JWT_SECRET environment variable is required"):
        super().__init__(message)


class ApiError(Exception):
    """HTTP-level error rendered directly as an error envelope."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details

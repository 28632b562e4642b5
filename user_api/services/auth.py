"""Authentication service for registration, login and token validation."""

import logging

from user_api.exceptions import (
    AuthServiceError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from user_api.models.user import User
from user_api.schemas.auth import AuthData, TokenPayload, UserLogin, UserRegister
from user_api.schemas.user import UserResponse
from user_api.services.passwords import PasswordHasher
from user_api.services.tokens import TokenService
from user_api.services.users import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Composes the user service with password and token handling."""

    def __init__(self, users: UserService, passwords: PasswordHasher, tokens: TokenService):
        self.users = users
        self.passwords = passwords
        self.tokens = tokens

    def _auth_data(self, user: User) -> AuthData:
        token = self.tokens.issue(TokenPayload(user_id=user.id, email=user.email))
        return AuthData(token=token, user=UserResponse.model_validate(user))

    def register(self, data: UserRegister) -> AuthData:
        """
        Register a new user and issue a token.

        Raises:
            UserAlreadyExistsError: email already registered
            AuthServiceError: any other failure, token issuance included
        """
        try:
            user = self.users.create_user(data)
            result = self._auth_data(user)
        except UserAlreadyExistsError:
            raise
        except Exception as e:
            logger.error(f"Registration failed: {e}")
            raise AuthServiceError("Registration failed", e) from e

        logger.info(f"Registered user {user.id}")
        return result

    def login(self, data: UserLogin) -> AuthData:
        """
        Authenticate with email and password and issue a token.

        Raises:
            InvalidCredentialsError: unknown email or wrong password, indistinguishably
            AuthServiceError: infrastructure failure
        """
        try:
            user = self.users.find_by_email(data.email)
            if user is None or not self.passwords.verify(data.password, user.password_hash):
                raise InvalidCredentialsError()
            result = self._auth_data(user)
        except InvalidCredentialsError:
            logger.info("Rejected login attempt")
            raise
        except Exception as e:
            logger.error(f"Login failed: {e}")
            raise AuthServiceError("Login failed", e) from e

        logger.info(f"User {user.id} logged in")
        return result

    def validate_token(self, token: str) -> TokenPayload:
        """
        Verify a token and check that its user still exists.

        Raises:
            AuthServiceError: "User no longer exists" for stale accounts,
                "Token validation failed" for everything else
        """
        try:
            payload = self.tokens.verify(token)
            user = self.users.find_by_id(payload.user_id)
        except Exception as e:
            raise AuthServiceError("Token validation failed", e) from e

        if user is None:
            raise AuthServiceError("User no longer exists")
        return payload

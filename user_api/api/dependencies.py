"""FastAPI dependencies for authentication, services and database."""

import logging
from typing import Annotated

from fastapi import Depends, Request, status
from sqlalchemy.orm import Session

from user_api.database import get_db
from user_api.exceptions import (
    ApiError,
    InvalidTokenError,
    TokenConfigurationError,
    TokenError,
    TokenExpiredError,
    TokenPayloadError,
)
from user_api.schemas.auth import TokenPayload
from user_api.services.auth import AuthService
from user_api.services.passwords import PasswordHasher
from user_api.services.tokens import TokenService
from user_api.services.users import UserService

logger = logging.getLogger(__name__)


def get_password_hasher(request: Request) -> PasswordHasher:
    """Get the application's password hasher."""
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    """Get the application's token service."""
    return request.app.state.token_service


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    passwords: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(db, passwords)


def get_auth_service(
    users: Annotated[UserService, Depends(get_user_service)],
    passwords: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(users, passwords, tokens)


def _unauthorized(code: str, message: str) -> ApiError:
    return ApiError(status.HTTP_401_UNAUTHORIZED, code, message)


def authenticate_request(request: Request, tokens: TokenService) -> TokenPayload:
    """Validate the bearer token on a request and attach its payload.

    Stops at the first failure:
    missing header, malformed header, empty token, then token verification.
    """
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise _unauthorized("MISSING_TOKEN", "Authorization header is required")

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise _unauthorized(
            "INVALID_TOKEN_FORMAT", "Authorization header must be in format: Bearer <token>"
        )

    token = parts[1]
    if not token:
        raise _unauthorized("MISSING_TOKEN", "Token is required")

    try:
        payload = tokens.verify(token)
    except TokenExpiredError as e:
        raise _unauthorized("TOKEN_EXPIRED", str(e)) from e
    except InvalidTokenError as e:
        raise _unauthorized("INVALID_TOKEN", str(e)) from e
    except TokenPayloadError as e:
        raise _unauthorized("INVALID_TOKEN_PAYLOAD", str(e)) from e
    except TokenConfigurationError as e:
        logger.error(f"Token verification unavailable: {e}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "SERVER_ERROR", str(e)) from e
    except TokenError as e:
        raise _unauthorized("INVALID_TOKEN", str(e)) from e
    except Exception as e:
        logger.exception("Unexpected error during authentication")
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "SERVER_ERROR",
            "Internal server error during authentication",
        ) from e

    request.state.user = payload
    return payload


def require_auth(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenPayload:
    """Require a valid bearer token."""
    return authenticate_request(request, tokens)


def optional_auth(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenPayload | None:
    """Allow anonymous requests, but validate the token whenever a header is sent."""
    if not request.headers.get("authorization"):
        request.state.user = None
        return None
    return authenticate_request(request, tokens)

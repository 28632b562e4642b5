"""Pydantic schemas for API requests and responses."""

from user_api.schemas.auth import AuthData, TokenPayload, UserLogin, UserRegister
from user_api.schemas.common import ErrorBody, ErrorResponse, MessageResponse, SuccessResponse
from user_api.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "TokenPayload",
    "AuthData",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "SuccessResponse",
    "MessageResponse",
    "ErrorBody",
    "ErrorResponse",
]

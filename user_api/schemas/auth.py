"""Authentication schemas."""

from pydantic import BaseModel, Field

from user_api.schemas.user import Email, UserCreate, UserResponse


class UserRegister(UserCreate):
    """User registration request."""


class UserLogin(BaseModel):
    """User login request."""

    email: Email
    password: str = Field(..., min_length=1, max_length=128)


class TokenPayload(BaseModel):
    """Claims carried by a bearer token."""

    user_id: str
    email: str


class AuthData(BaseModel):
    """Authentication result with token and user info."""

    token: str
    user: UserResponse

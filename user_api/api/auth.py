"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from user_api.api.dependencies import get_auth_service, get_user_service, require_auth
from user_api.exceptions import UserNotFoundError
from user_api.schemas.auth import AuthData, TokenPayload, UserLogin, UserRegister
from user_api.schemas.common import SuccessResponse
from user_api.schemas.user import UserResponse
from user_api.services.auth import AuthService
from user_api.services.users import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=SuccessResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def register(
    user_data: UserRegister,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    result = auth_service.register(user_data)
    return SuccessResponse(data=result, message="User registered successfully")


@router.post("/login", response_model=SuccessResponse[AuthData])
def login(
    credentials: UserLogin,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    result = auth_service.login(credentials)
    return SuccessResponse(data=result, message="Login successful")


@router.get(
    "/me",
    response_model=SuccessResponse[UserResponse],
    response_model_exclude_none=True,
)
def get_me(
    current_user: Annotated[TokenPayload, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get current user information."""
    user = user_service.find_by_id(current_user.user_id)
    if user is None:
        raise UserNotFoundError(current_user.user_id)
    return SuccessResponse(data=UserResponse.model_validate(user))

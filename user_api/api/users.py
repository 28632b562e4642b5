"""User CRUD API endpoints. Every route requires a bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from user_api.api.dependencies import get_user_service, require_auth
from user_api.exceptions import ApiError
from user_api.schemas.auth import TokenPayload
from user_api.schemas.common import MessageResponse, SuccessResponse
from user_api.schemas.user import UserCreate, UserResponse, UserUpdate
from user_api.services.users import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get(
    "",
    response_model=SuccessResponse[list[UserResponse]],
    response_model_exclude_none=True,
)
def list_users(
    current_user: Annotated[TokenPayload, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get all users, newest first."""
    users = user_service.list_users()
    return SuccessResponse(data=[UserResponse.model_validate(u) for u in users])


@router.get(
    "/{user_id}",
    response_model=SuccessResponse[UserResponse],
    response_model_exclude_none=True,
)
def get_user(
    user_id: str,
    current_user: Annotated[TokenPayload, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a user by ID."""
    user = user_service.find_by_id(user_id)
    if user is None:
        raise ApiError(
            status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", f"User with ID {user_id} not found"
        )
    return SuccessResponse(data=UserResponse.model_validate(user))


@router.post(
    "",
    response_model=SuccessResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    user_data: UserCreate,
    current_user: Annotated[TokenPayload, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Create a user."""
    user = user_service.create_user(user_data)
    return SuccessResponse(
        data=UserResponse.model_validate(user), message="User created successfully"
    )


@router.put("/{user_id}", response_model=SuccessResponse[UserResponse])
def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: Annotated[TokenPayload, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update a user. Only supplied fields change."""
    user = user_service.update_user(user_id, user_data)
    return SuccessResponse(
        data=UserResponse.model_validate(user), message="User updated successfully"
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    current_user: Annotated[TokenPayload, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Delete a user."""
    user_service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")

"""User schemas."""

import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    model_validator,
)
from pydantic.alias_generators import to_camel


def normalize_email(value: Any) -> Any:
    """Trim and lowercase an email before format validation."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


def check_password_strength(value: str) -> str:
    """Require a lowercase letter, an uppercase letter and a digit, and no NUL bytes."""
    if "\x00" in value:
        raise ValueError("Password must not contain NUL characters")
    if not (
        re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)
    ):
        raise ValueError(
            "Password must contain at least one lowercase letter, "
            "one uppercase letter, and one digit"
        )
    return value


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Email = Annotated[EmailStr, BeforeValidator(normalize_email)]
Password = Annotated[
    str, Field(min_length=8, max_length=128), AfterValidator(check_password_strength)
]


class UserCreate(BaseModel):
    """Create a user."""

    name: Name
    email: Email
    password: Password


class UserUpdate(BaseModel):
    """Partially update a user. At least one field is required."""

    name: Name | None = None
    email: Email | None = None
    password: Password | None = None

    @model_validator(mode="after")
    def require_at_least_one_field(self) -> "UserUpdate":
        if self.name is None and self.email is None and self.password is None:
            raise ValueError("At least one field must be provided for update")
        return self


class UserResponse(BaseModel):
    """User information response. Never carries the password hash."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

"""Response envelopes shared by every endpoint."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from user_api.models.mixins import utcnow

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """Successful response wrapping a payload."""

    success: bool = True
    data: T
    message: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)


class MessageResponse(BaseModel):
    """Successful response without a payload."""

    success: bool = True
    message: str
    timestamp: datetime = Field(default_factory=utcnow)


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Any | None = None


class ErrorResponse(BaseModel):
    """Error response returned for every failure."""

    success: bool = False
    error: ErrorBody
    timestamp: datetime = Field(default_factory=utcnow)
    path: str

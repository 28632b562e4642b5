"""User model."""

import uuid

from sqlalchemy import Column, String

from user_api.database import Base
from user_api.models.mixins import TimestampMixin


def new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base, TimestampMixin):
    """User model for authentication and account management."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_user_id)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

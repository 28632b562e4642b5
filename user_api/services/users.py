"""User service for account CRUD."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import ObjectDeletedError, StaleDataError

from user_api.exceptions import UserAlreadyExistsError, UserNotFoundError, UserServiceError
from user_api.models.user import User
from user_api.schemas.user import UserCreate, UserUpdate
from user_api.services.passwords import PasswordHasher

logger = logging.getLogger(__name__)


def is_unique_violation(error: IntegrityError) -> bool:
    """Check whether an integrity error came from a unique constraint."""
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    message = str(error.orig).lower()
    return "unique" in message or "duplicate key" in message


class UserService:
    """Service for user-related operations."""

    def __init__(self, db: Session, passwords: PasswordHasher):
        self.db = db
        self.passwords = passwords

    def create_user(self, data: UserCreate) -> User:
        """
        Create a user with a hashed password.

        Raises:
            UserAlreadyExistsError: email already registered (pre-check or unique constraint)
            UserServiceError: any other storage failure
        """
        email = data.email.lower()
        if self.find_by_email(email) is not None:
            raise UserAlreadyExistsError(email)

        try:
            user = User(name=data.name, email=email, password_hash=self.passwords.hash(data.password))
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                # Lost a race with a concurrent registration
                raise UserAlreadyExistsError(email) from e
            logger.error(f"Failed to create user {email}: {e}")
            raise UserServiceError("Failed to create user", e) from e
        except (SQLAlchemyError, ValueError) as e:
            self.db.rollback()
            logger.error(f"Failed to create user {email}: {e}")
            raise UserServiceError("Failed to create user", e) from e

        logger.info(f"Created user {user.id}")
        return user

    def find_by_id(self, user_id: str) -> User | None:
        """Get a user by ID, or None."""
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as e:
            raise UserServiceError(f"Failed to find user by ID: {user_id}", e) from e

    def find_by_email(self, email: str) -> User | None:
        """Get a user by email (case-insensitive), or None."""
        try:
            return self.db.query(User).filter(User.email == email.lower()).first()
        except SQLAlchemyError as e:
            raise UserServiceError(f"Failed to find user by email: {email}", e) from e

    def list_users(self) -> list[User]:
        """Get all users, newest first."""
        try:
            return self.db.query(User).order_by(User.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise UserServiceError("Failed to retrieve users", e) from e

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        """
        Apply a partial update. Only supplied fields are touched.

        Raises:
            UserNotFoundError: user does not exist
            UserAlreadyExistsError: new email belongs to another user
            UserServiceError: any other storage failure
        """
        user = self.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        email = data.email.lower() if data.email else None
        if email and email != user.email:
            other = self.find_by_email(email)
            if other is not None and other.id != user.id:
                raise UserAlreadyExistsError(email)

        try:
            if data.name:
                user.name = data.name
            if email:
                user.email = email
            if data.password:
                user.password_hash = self.passwords.hash(data.password)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                raise UserAlreadyExistsError(email or "unknown") from e
            raise UserServiceError(f"Failed to update user: {user_id}", e) from e
        except (StaleDataError, ObjectDeletedError) as e:
            self.db.rollback()
            raise UserNotFoundError(user_id) from e
        except (SQLAlchemyError, ValueError) as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user_id}: {e}")
            raise UserServiceError(f"Failed to update user: {user_id}", e) from e

        logger.info(f"Updated user {user_id}")
        return user

    def delete_user(self, user_id: str) -> None:
        """
        Delete a user.

        Raises:
            UserNotFoundError: no row with this ID
            UserServiceError: any other storage failure
        """
        try:
            deleted = self.db.query(User).filter(User.id == user_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise UserServiceError(f"Failed to delete user: {user_id}", e) from e

        if not deleted:
            raise UserNotFoundError(user_id)
        logger.info(f"Deleted user {user_id}")

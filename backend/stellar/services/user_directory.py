"""User directory: the persisted store of user accounts.

The directory exclusively owns User records. The authorization gate only
reads from it, through ``get_by_id``.
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stellar.core.security import get_password_hash, verify_password
from stellar.models.user import User
from stellar.services.table import RecordNotFoundError, ResourceTable

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are compared and stored in lower case."""
    return email.strip().lower()


class UserConflictError(Exception):
    """The email address is already registered to another user."""

    def __init__(self, email: str):
        super().__init__(f"Email {email} is already registered")
        self.email = email


class UserNotFoundError(RecordNotFoundError):
    def __init__(self, user_id: int):
        super().__init__("User", user_id)


class UserDirectory(ResourceTable[User]):
    """Keyed store of users backed by the ``users`` table."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def create(self, data: dict[str, Any]) -> User:
        """Register a user. ``data`` carries the plaintext ``password``.

        Raises:
            UserConflictError: the email is already registered.
        """
        fields = dict(data)
        password = fields.pop("password")
        fields["email"] = normalize_email(fields["email"])
        if self.get_by_email(fields["email"]) is not None:
            raise UserConflictError(fields["email"])
        fields["password_hash"] = get_password_hash(password)
        try:
            return super().create(fields)
        except IntegrityError as e:
            self.db.rollback()
            raise UserConflictError(fields["email"]) from e

    def update(self, user_id: int, data: dict[str, Any]) -> User:
        """Change any field but the id, re-hashing a new password.

        Raises:
            UserNotFoundError: no user has this id.
            UserConflictError: the new email belongs to another user.
        """
        user = self.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        fields = dict(data)
        fields.pop("id", None)
        if "password" in fields:
            fields["password_hash"] = get_password_hash(fields.pop("password"))
        if fields.get("email"):
            fields["email"] = normalize_email(fields["email"])
        new_email = fields.get("email")
        if new_email and new_email != user.email and self.get_by_email(new_email) is not None:
            raise UserConflictError(new_email)

        try:
            return super().update(user_id, fields)
        except IntegrityError as e:
            self.db.rollback()
            raise UserConflictError(new_email or user.email) from e

    def delete(self, user_id: int) -> None:
        """Raises UserNotFoundError if no user has this id."""
        if self.get(user_id) is None:
            raise UserNotFoundError(user_id)
        super().delete(user_id)

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when the password matches, otherwise None."""
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

"""User model."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import Mapped, mapped_column

from stellar.core.roles import UserRole, parse_role
from stellar.db.base import Base


class RoleType(TypeDecorator):
    """Stores a UserRole as its plain name; unknown stored names load as INVALID."""

    impl = String(10)
    cache_ok = True

    def process_bind_param(self, value, dialect) -> Optional[str]:
        if value is None:
            return None
        return parse_role(value).value

    def process_result_value(self, value, dialect) -> Optional[UserRole]:
        if value is None:
            return None
        return parse_role(value)


class User(Base):
    """User account for authentication and RBAC."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    fullname: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        RoleType(),
        default=UserRole.READER,
        nullable=False,
    )

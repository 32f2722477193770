"""User schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from stellar.core.roles import UserRole, parse_role

# bcrypt only accepts passwords up to 72 bytes
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes as UTF-8")
    return v


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    fullname: str = Field(..., min_length=1, max_length=100)


class UserCreate(UserBase):
    """User creation schema."""

    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_BYTES)
    role: UserRole = UserRole.READER

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)

    @field_validator("role", mode="before")
    @classmethod
    def parse_role_name(cls, v):
        return parse_role(v)


class UserUpdate(BaseModel):
    """User update schema. Omitted fields are left unchanged."""

    email: Optional[EmailStr] = None
    fullname: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=1, max_length=PASSWORD_MAX_BYTES)
    role: Optional[UserRole] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)

    @field_validator("role", mode="before")
    @classmethod
    def parse_role_name(cls, v):
        if v is None:
            return None
        return parse_role(v)


class UserResponse(UserBase):
    """User response schema. Never carries the password hash."""

    id: int
    role: UserRole

    model_config = {"from_attributes": True}

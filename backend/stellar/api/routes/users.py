"""User routes: login, registration and gated account management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from stellar.core.config import settings
from stellar.core.rbac import CRUD_ROLES, RequireReader, gate
from stellar.core.roles import ROLE_HIERARCHY, meets_minimum
from stellar.core.security import TokenCodec, get_token_codec
from stellar.db.session import DbSession
from stellar.schemas.auth import LoginRequest, Token
from stellar.schemas.user import UserCreate, UserResponse, UserUpdate
from stellar.services.user_directory import (
    UserConflictError,
    UserDirectory,
    UserNotFoundError,
)

logger = logging.getLogger("auth")

router = APIRouter()


def _create_user(db, user_data: UserCreate):
    try:
        return UserDirectory(db).create(user_data.model_dump())
    except UserConflictError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")


@router.post("/login", response_model=Token)
def login(
    request: Request,
    login_request: LoginRequest,
    db: DbSession,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
):
    """Authenticate user and return a bearer token."""
    client_ip = request.client.host if request.client else "unknown"
    user = UserDirectory(db).authenticate(login_request.email, login_request.password)
    if user is None:
        logger.warning(f"Failed login attempt for email: {login_request.email} from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    logger.info(f"Successful login: {user.email} (ID: {user.id}, role: {user.role.value}) from IP: {client_ip}")
    return Token(access_token=codec.issue(user))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: DbSession):
    """Self-registration. Anyone may call this.

    The requested role is stored as given, up to
    ``settings.self_registration_max_role``. Unknown role names are stored
    as INVALID.
    """
    cap = settings.self_registration_max_role
    if user_data.role in ROLE_HIERARCHY and not meets_minimum(cap, user_data.role):
        logger.info(f"Self-registration for {user_data.email} lowered from {user_data.role.value} to {cap.value}")
        user_data = user_data.model_copy(update={"role": cap})
    user = _create_user(db, user_data)
    logger.info(f"Registered user {user.email} (ID: {user.id}, role: {user.role.value})")
    return user


@router.get("/me", response_model=UserResponse)
def get_me(current_user: RequireReader, db: DbSession):
    """Return the caller's own account."""
    user = current_user.user or UserDirectory(db).get_by_id(current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[gate(CRUD_ROLES.create)],
)
def create_user(user_data: UserCreate, db: DbSession):
    """Create a new user."""
    return _create_user(db, user_data)


@router.get("", response_model=list[UserResponse], dependencies=[gate(CRUD_ROLES.read)])
def list_users(db: DbSession):
    """List all users."""
    return UserDirectory(db).get_all()


@router.get("/{user_id}", response_model=UserResponse, dependencies=[gate(CRUD_ROLES.read)])
def get_user(user_id: int, db: DbSession):
    """Get a specific user."""
    user = UserDirectory(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/{user_id}", response_model=UserResponse, dependencies=[gate(CRUD_ROLES.update)])
def update_user(user_id: int, user_data: UserUpdate, db: DbSession):
    """Update a user, including their role."""
    update_data = user_data.model_dump(exclude_unset=True, exclude_none=True)
    try:
        return UserDirectory(db).update(user_id, update_data)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except UserConflictError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[gate(CRUD_ROLES.delete)],
)
def delete_user(user_id: int, db: DbSession):
    """Delete a user."""
    try:
        UserDirectory(db).delete(user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

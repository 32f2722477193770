"""Role-Based Access Control (RBAC): the authorization gate.

Every guarded route declares a minimum role. The gate reads the bearer token
from the request headers, verifies it, and compares the token's role claim
against that minimum before the handler runs. The role claim is trusted as
issued; the directory is only consulted to attach the caller's User record.

Both rejection kinds surface as HTTP 401 with the same body, so a client
cannot tell a bad token from an under-privileged one. The distinction is
kept in the ``auth`` log.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Mapping, Optional, Protocol

from fastapi import Depends, HTTPException, Request, status

from stellar.core.config import settings
from stellar.core.roles import UserRole, meets_minimum
from stellar.core.security import AuthError, TokenClaims, TokenCodec, get_token_codec
from stellar.db.session import DbSession
from stellar.models.user import User
from stellar.services.user_directory import UserDirectory

logger = logging.getLogger("auth")

UNAUTHORIZED_MESSAGE = "Unauthorized"


class AuthorizationError(Exception):
    """The gate rejected the request."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class UnauthenticatedError(AuthorizationError):
    """No usable bearer token: missing, malformed, expired or badly signed."""


class ForbiddenError(AuthorizationError):
    """Valid token whose role is below the route's minimum."""


class TokenVerifier(Protocol):
    def verify(self, token: str) -> TokenClaims: ...


class UserLookup(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]: ...


@dataclass(frozen=True)
class AuthorizedUser:
    """The admitted caller, attached to ``request.state.authorized_user``.

    ``user`` is None when it was not resolved or the account no longer exists.
    """

    claims: TokenClaims
    user: Optional[User] = None

    @property
    def id(self) -> int:
        return self.claims.subject

    @property
    def role(self) -> UserRole:
        return self.claims.role


@dataclass(frozen=True)
class RoleTable:
    """Minimum role per CRUD operation of a resource."""

    create: UserRole
    read: UserRole
    update: UserRole
    delete: UserRole


CRUD_ROLES = RoleTable(
    create=UserRole.WRITER,
    read=UserRole.READER,
    update=UserRole.EDITOR,
    delete=UserRole.ADMIN,
)


def extract_bearer_token(headers: Mapping[str, str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header.

    The scheme name is matched case-insensitively.
    """
    auth_header = headers.get("Authorization") or headers.get("authorization")
    if not auth_header:
        raise UnauthenticatedError("Missing Authorization header")
    scheme, _, token = auth_header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthenticatedError("Authorization header is not a Bearer token")
    return token


def authorize(
    headers: Mapping[str, str],
    minimum_role: UserRole,
    codec: TokenVerifier,
    directory: Optional[UserLookup] = None,
    resolve_user: bool = True,
) -> AuthorizedUser:
    """Admit or reject a request for a route requiring ``minimum_role``.

    Runs to completion before any handler code. Has no side effects, so the
    same headers and minimum always give the same verdict until the token
    expires.

    Raises:
        UnauthenticatedError: header missing/malformed or token rejected.
        ForbiddenError: the token's role claim is below ``minimum_role``.
    """
    token = extract_bearer_token(headers)

    try:
        claims = codec.verify(token)
    except AuthError as e:
        raise UnauthenticatedError(f"Token rejected ({e.reason}): {e.message}") from e

    if not meets_minimum(claims.role, minimum_role):
        raise ForbiddenError(
            f"User {claims.subject} has role {claims.role.value}, "
            f"requires {minimum_role.value} or higher"
        )

    user = None
    if resolve_user and directory is not None:
        user = directory.get_by_id(claims.subject)
    return AuthorizedUser(claims=claims, user=user)


def require_role(minimum_role: UserRole):
    """Dependency to require a minimum role level."""

    def role_checker(
        request: Request,
        db: DbSession,
        codec: Annotated[TokenCodec, Depends(get_token_codec)],
    ) -> AuthorizedUser:
        try:
            authorized = authorize(
                request.headers,
                minimum_role,
                codec,
                UserDirectory(db),
                resolve_user=settings.gate_resolve_user,
            )
        except AuthorizationError as e:
            logger.warning(
                f"{type(e).__name__}: {request.method} {request.url.path} - {e.detail}"
            )
            raise HTTPException(
                status_code=e.status_code,
                detail=UNAUTHORIZED_MESSAGE,
                headers={"WWW-Authenticate": "Bearer"},
            )
        request.state.authorized_user = authorized
        return authorized

    return role_checker


def gate(minimum_role: UserRole):
    """Route-level form of ``require_role`` for ``dependencies=[...]``."""
    return Depends(require_role(minimum_role))


# Role dependency for handlers that need the caller
RequireReader = Annotated[AuthorizedUser, Depends(require_role(UserRole.READER))]

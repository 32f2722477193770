"""Security utilities: password hashing and the bearer token codec."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional, Protocol

import bcrypt
import jwt

from stellar.core.config import settings
from stellar.core.roles import UserRole, parse_role

logger = logging.getLogger(__name__)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hash.

    Uses bcrypt's built-in timing-safe comparison.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError as e:
        logger.warning(f"Password verification error: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt()
    ).decode('utf-8')


# ---------------------------------------------------------------------------
# Token verification errors
# ---------------------------------------------------------------------------

class AuthError(Exception):
    """A presented token could not be turned into verified claims."""

    reason = "invalid"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
        self.message = message


class TokenMalformedError(AuthError):
    reason = "malformed"


class TokenSignatureError(AuthError):
    reason = "invalid_signature"


class TokenExpiredError(AuthError):
    reason = "expired"


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity carried by a bearer token."""

    subject: int
    role: UserRole


class TokenSubject(Protocol):
    id: int
    email: str
    role: UserRole


class TokenCodec:
    """Issue and verify signed bearer tokens.

    Purely functional over the key material it was built with.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 expire_minutes: Optional[int] = None):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user: TokenSubject, expires_delta: timedelta | None = None) -> str:
        """Create a token embedding the user's id and current role."""
        now = datetime.now(timezone.utc)
        to_encode: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "role": parse_role(user.role).value,
            "iat": now,
        }
        if expires_delta is not None:
            to_encode["exp"] = now + expires_delta
        elif self.expire_minutes is not None:
            to_encode["exp"] = now + timedelta(minutes=self.expire_minutes)
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Decode and validate a token.

        Raises:
            TokenExpiredError: the ``exp`` claim is present and elapsed.
            TokenSignatureError: the signature does not match the key.
            TokenMalformedError: anything else that keeps the string from
                being read as a token carrying ``sub`` and ``role``.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "role"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidSignatureError as e:
            raise TokenSignatureError("Token signature verification failed") from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformedError(f"Malformed token: {e}") from e

        try:
            subject = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise TokenMalformedError("Token subject is not a user id") from e

        return TokenClaims(subject=subject, role=parse_role(payload["role"]))


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide codec built from settings; overridable as a dependency."""
    return TokenCodec(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )

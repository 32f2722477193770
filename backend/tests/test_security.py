"""Tests for password hashing and the bearer token codec."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from stellar.core.roles import UserRole
from stellar.core.security import (
    AuthError,
    TokenClaims,
    TokenCodec,
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureError,
    get_password_hash,
    verify_password,
)

SECRET = "unit-test-signing-key-0123456789abcdef"


@dataclass
class FakeUser:
    id: int
    email: str
    role: UserRole


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(SECRET, "HS256", expire_minutes=30)


# ============== Password hashing ==============

class TestPasswordHashing:
    def test_hash_and_verify(self):
        h = get_password_hash("secret123")
        assert verify_password("secret123", h)

    def test_hash_never_equals_plaintext(self):
        assert get_password_hash("secret123") != "secret123"

    def test_wrong_password_rejected(self):
        h = get_password_hash("secret123")
        assert not verify_password("wrong", h)

    def test_hash_is_unique(self):
        assert get_password_hash("same") != get_password_hash("same")

    def test_invalid_hash_returns_false(self):
        assert not verify_password("test", "not-a-hash")


# ============== Token codec ==============

class TestIssueVerify:
    @pytest.mark.parametrize("role", [UserRole.READER, UserRole.WRITER, UserRole.EDITOR, UserRole.ADMIN])
    def test_verify_returns_issued_identity(self, codec, role):
        user = FakeUser(id=42, email="a@stellar.io", role=role)
        claims = codec.verify(codec.issue(user))
        assert claims == TokenClaims(subject=42, role=role)

    def test_token_carries_expiry_and_issued_at(self, codec):
        token = codec.issue(FakeUser(1, "a@stellar.io", UserRole.READER))
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["sub"] == "1"
        assert payload["role"] == "READER"
        assert "iat" in payload
        assert "exp" in payload

    def test_no_expiry_when_not_configured(self):
        codec = TokenCodec(SECRET, "HS256", expire_minutes=None)
        token = codec.issue(FakeUser(1, "a@stellar.io", UserRole.WRITER))
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert "exp" not in payload
        assert codec.verify(token).role is UserRole.WRITER

    def test_invalid_role_survives_round_trip(self, codec):
        token = codec.issue(FakeUser(7, "x@stellar.io", UserRole.INVALID))
        assert codec.verify(token).role is UserRole.INVALID

    def test_unknown_role_claim_parses_to_invalid(self, codec):
        token = jwt.encode({"sub": "7", "role": "OVERLORD"}, SECRET, algorithm="HS256")
        assert codec.verify(token) == TokenClaims(subject=7, role=UserRole.INVALID)


class TestVerifyErrors:
    def test_expired_token(self, codec):
        token = codec.issue(FakeUser(1, "a@stellar.io", UserRole.ADMIN), expires_delta=timedelta(seconds=-10))
        with pytest.raises(TokenExpiredError) as exc_info:
            codec.verify(token)
        assert exc_info.value.reason == "expired"

    def test_wrong_key_is_signature_error(self, codec):
        other = TokenCodec("a-completely-different-signing-key-4567", "HS256")
        token = other.issue(FakeUser(1, "a@stellar.io", UserRole.ADMIN))
        with pytest.raises(TokenSignatureError) as exc_info:
            codec.verify(token)
        assert exc_info.value.reason == "invalid_signature"

    @pytest.mark.parametrize("token", ["", "not.a.token", "garbage", "a.b"])
    def test_unparseable_strings_are_malformed(self, codec, token):
        with pytest.raises(TokenMalformedError):
            codec.verify(token)

    def test_missing_role_claim_is_malformed(self, codec):
        token = jwt.encode({"sub": "1"}, SECRET, algorithm="HS256")
        with pytest.raises(TokenMalformedError):
            codec.verify(token)

    def test_missing_subject_is_malformed(self, codec):
        token = jwt.encode({"role": "ADMIN"}, SECRET, algorithm="HS256")
        with pytest.raises(TokenMalformedError):
            codec.verify(token)

    def test_non_numeric_subject_is_malformed(self, codec):
        token = jwt.encode({"sub": "alice", "role": "ADMIN"}, SECRET, algorithm="HS256")
        with pytest.raises(TokenMalformedError):
            codec.verify(token)

    def test_all_errors_share_a_base(self, codec):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "1", "role": "ADMIN", "exp": now - timedelta(minutes=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthError):
            codec.verify(token)

"""Pytest configuration and fixtures."""

import itertools
import os

# Keep the app's own engine off disk and sign with a full-length key
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

import pytest
from typing import Callable, Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stellar.core.roles import UserRole
from stellar.core.security import get_password_hash, get_token_codec
from stellar.db.base import Base
from stellar.db.session import get_db
from stellar.main import app
from stellar.models import Empire, Location, User

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_PASSWORD = "StålGardinerFunkerFjell53"
# bcrypt is slow on purpose; hash the shared fixture password once
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory inserting a user with the given role straight into the table."""
    counter = itertools.count(1)

    def _make(role: UserRole = UserRole.READER, email: str | None = None) -> User:
        n = next(counter)
        user = User(
            email=email or f"{role.value.lower()}{n}@stellar.io",
            password_hash=TEST_PASSWORD_HASH,
            fullname="Josef Stålhard",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def headers_for(make_user) -> Callable[[UserRole], dict]:
    """Create a user with ``role`` and return bearer headers for them."""
    def _headers(role: UserRole) -> dict:
        user = make_user(role)
        return {"Authorization": f"Bearer {get_token_codec().issue(user)}"}

    return _headers


@pytest.fixture
def test_location(db_session: Session) -> Location:
    """Create a test location."""
    location = Location(star_system="Fountain", area="The Serpent's Lair")
    db_session.add(location)
    db_session.commit()
    db_session.refresh(location)
    return location


@pytest.fixture
def test_empire(db_session: Session, test_location: Location) -> Empire:
    """Create a test empire seated at the test location."""
    empire = Empire(
        name="Guristas",
        slogan="Nothing is free",
        location_id=test_location.id,
        description="Pirate cartel of the southern reaches",
    )
    db_session.add(empire)
    db_session.commit()
    db_session.refresh(empire)
    return empire

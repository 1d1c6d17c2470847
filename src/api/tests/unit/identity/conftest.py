"""Fixtures shared by the identity unit tests."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from identity.application.security import hash_password
from identity.domain.aggregates import User
from identity.domain.value_objects import Role, UserId
from shared_kernel.auth import SessionTokenProbe, SessionTokenService
from tests.unit.identity.fakes import (
    FakeIdentityProvider,
    FakeSession,
    InMemoryAPIKeyRepository,
    InMemoryUserRepository,
    StubTokenValidator,
)

TEST_SESSION_SECRET = "test-session-secret-0123456789abcdef"  # gitleaks:allow
TEST_SESSION_ISSUER = "portcullis-test"
TEST_PASSWORD = "Abc12345!"

# Lowest work factor bcrypt accepts; keeps hashing fast in tests
FAST_BCRYPT_ROUNDS = 4


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def api_key_repo(user_repo: InMemoryUserRepository) -> InMemoryAPIKeyRepository:
    return InMemoryAPIKeyRepository(user_repo)


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def token_validator() -> StubTokenValidator:
    return StubTokenValidator()


@pytest.fixture
def session_tokens() -> SessionTokenService:
    return SessionTokenService(
        secret=TEST_SESSION_SECRET,
        issuer=TEST_SESSION_ISSUER,
        probe=MagicMock(spec=SessionTokenProbe),
        ttl=timedelta(hours=12),
    )


@pytest.fixture
def password_user() -> User:
    """An active password account with the default role."""
    return User(
        id=UserId.generate(),
        email="alice@example.com",
        user_name="alice",
        password_hash=hash_password(TEST_PASSWORD, rounds=FAST_BCRYPT_ROUNDS),
    )


@pytest.fixture
def admin_user() -> User:
    return User(
        id=UserId.generate(),
        email="admin@example.com",
        roles=(Role.USER, Role.ADMIN),
    )

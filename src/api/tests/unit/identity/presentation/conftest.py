"""FastAPI app wired to in-memory collaborators for route tests.

Real services and the real authenticator run behind the routes; only the
store, the identity provider and the token validator are replaced.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from identity.application.services import (
    APIKeyService,
    FederatedIdentityService,
    PasswordAuthService,
    UserService,
)
from identity.dependencies.api_key import get_api_key_service
from identity.dependencies.federated import get_federated_identity_service
from identity.dependencies.user import (
    get_password_auth_service,
    get_session_token_service,
    get_user_service,
)
from identity.domain.aggregates import User
from identity.presentation import router as identity_router
from tests.unit.identity.conftest import FAST_BCRYPT_ROUNDS, TEST_PASSWORD


@pytest.fixture
def password_service(fake_session, user_repo, session_tokens) -> PasswordAuthService:
    return PasswordAuthService(
        session=fake_session,
        user_repository=user_repo,
        session_tokens=session_tokens,
        bcrypt_rounds=FAST_BCRYPT_ROUNDS,
    )


@pytest.fixture
def app(
    fake_session,
    user_repo,
    api_key_repo,
    identity_provider,
    token_validator,
    session_tokens,
    password_service,
) -> FastAPI:
    app = FastAPI()
    app.include_router(identity_router)

    user_service = UserService(session=fake_session, user_repository=user_repo)
    api_key_service = APIKeyService(
        session=fake_session, api_key_repository=api_key_repo
    )
    federated_service = FederatedIdentityService(
        session=fake_session,
        user_repository=user_repo,
        identity_provider=identity_provider,
        token_validator=token_validator,
    )

    app.dependency_overrides[get_password_auth_service] = lambda: password_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_api_key_service] = lambda: api_key_service
    app.dependency_overrides[get_federated_identity_service] = lambda: federated_service
    app.dependency_overrides[get_session_token_service] = lambda: session_tokens
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login_headers(client: TestClient, user_repo, password_user: User):
    """Seed ``password_user`` and return headers carrying a session token for it."""
    user_repo.seed(password_user)
    response = client.get(
        "/auth/login",
        params={"email": password_user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    return bearer(response.json()["token"])


@pytest.fixture
def admin_headers(session_tokens, user_repo, admin_user: User):
    user_repo.seed(admin_user)
    return bearer(session_tokens.issue(admin_user.id.value).value)

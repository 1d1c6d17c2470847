"""Unit tests for the composite authenticator and its strategies.

Real services run over in-memory fakes so that each strategy is exercised
end to end, from credential envelope to principal.
"""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from identity.application.authentication import (
    APIKeyStrategy,
    CompositeAuthenticator,
    FederatedTokenStrategy,
    PasswordSessionStrategy,
)
from identity.application.observability import AuthenticationProbe
from identity.application.services import (
    APIKeyService,
    FederatedIdentityService,
    PasswordAuthService,
)
from identity.application.value_objects import CredentialEnvelope, CredentialScheme
from identity.domain.aggregates import User
from identity.domain.value_objects import UserId
from identity.ports.exceptions import InvalidCredentialsError, UnauthorizedError
from identity.ports.identity_provider import RemoteIdentity
from tests.unit.identity.conftest import FAST_BCRYPT_ROUNDS, TEST_PASSWORD


def basic(email: str, password: str) -> CredentialEnvelope:
    encoded = base64.b64encode(f"{email}:{password}".encode()).decode()
    return CredentialEnvelope(CredentialScheme.BASIC, encoded)


def bearer(token: str) -> CredentialEnvelope:
    return CredentialEnvelope(CredentialScheme.BEARER, token)


@pytest.fixture
def mock_probe():
    return create_autospec(AuthenticationProbe, instance=True)


@pytest.fixture
def api_key_service(fake_session, api_key_repo) -> APIKeyService:
    return APIKeyService(session=fake_session, api_key_repository=api_key_repo)


@pytest.fixture
def password_service(fake_session, user_repo, session_tokens) -> PasswordAuthService:
    return PasswordAuthService(
        session=fake_session,
        user_repository=user_repo,
        session_tokens=session_tokens,
        bcrypt_rounds=FAST_BCRYPT_ROUNDS,
    )


@pytest.fixture
def federated_service(
    fake_session, user_repo, identity_provider, token_validator
) -> FederatedIdentityService:
    return FederatedIdentityService(
        session=fake_session,
        user_repository=user_repo,
        identity_provider=identity_provider,
        token_validator=token_validator,
    )


@pytest.fixture
def authenticator(
    api_key_service, federated_service, password_service, session_tokens, mock_probe
) -> CompositeAuthenticator:
    return CompositeAuthenticator(
        strategies=[
            APIKeyStrategy(api_key_service),
            FederatedTokenStrategy(federated_service, session_tokens),
            PasswordSessionStrategy(password_service, session_tokens),
        ],
        probe=mock_probe,
    )


class TestStrategyOrder:
    def test_strategies_are_tried_in_fixed_order(self, authenticator):
        assert authenticator.strategy_names == ("api_key", "federated", "password")


class TestMissingCredentials:
    @pytest.mark.asyncio
    async def test_no_credentials_is_unauthorized(self, authenticator, mock_probe):
        with pytest.raises(UnauthorizedError) as exc_info:
            await authenticator.authenticate(None)

        assert not isinstance(exc_info.value, InvalidCredentialsError)
        assert exc_info.value.message == "Missing credentials"
        mock_probe.authentication_failed.assert_called_once_with(reason="no_credentials")

    @pytest.mark.asyncio
    async def test_no_strategy_is_invoked_without_a_match(self, mock_probe):
        strategy = MagicMock()
        strategy.name = "never"
        strategy.matches.return_value = False
        strategy.validate = AsyncMock()
        authenticator = CompositeAuthenticator([strategy], probe=mock_probe)

        with pytest.raises(UnauthorizedError):
            await authenticator.authenticate(bearer("anything"))

        strategy.validate.assert_not_awaited()


class TestAPIKeyStrategy:
    @pytest.mark.asyncio
    async def test_api_key_scheme_resolves_owner(
        self, authenticator, api_key_service, user_repo, password_user, mock_probe
    ):
        user_repo.seed(password_user)
        _, secret = await api_key_service.issue(password_user)

        principal = await authenticator.authenticate(
            CredentialEnvelope(CredentialScheme.API_KEY, secret)
        )

        assert principal.id == password_user.id
        mock_probe.user_authenticated.assert_called_once_with(
            user_id=password_user.id.value, strategy="api_key"
        )

    @pytest.mark.asyncio
    async def test_prefixed_bearer_value_is_an_api_key(
        self, authenticator, api_key_service, user_repo, password_user, identity_provider
    ):
        user_repo.seed(password_user)
        _, secret = await api_key_service.issue(password_user)

        principal = await authenticator.authenticate(bearer(secret))

        assert principal.id == password_user.id
        assert identity_provider.calls == []

    @pytest.mark.asyncio
    async def test_unknown_key_is_invalid_credentials(self, authenticator):
        with pytest.raises(InvalidCredentialsError):
            await authenticator.authenticate(
                CredentialEnvelope(CredentialScheme.API_KEY, "pcls_nope")
            )


class TestPasswordSessionStrategy:
    @pytest.mark.asyncio
    async def test_session_token_resolves_user(
        self, authenticator, user_repo, password_user, session_tokens, identity_provider
    ):
        user_repo.seed(password_user)
        token = session_tokens.issue(password_user.id.value)

        principal = await authenticator.authenticate(bearer(token.value))

        assert principal.id == password_user.id
        assert identity_provider.calls == []

    @pytest.mark.asyncio
    async def test_basic_credentials_resolve_user(
        self, authenticator, user_repo, password_user
    ):
        user_repo.seed(password_user)

        principal = await authenticator.authenticate(
            basic("alice@example.com", TEST_PASSWORD)
        )

        assert principal.id == password_user.id

    @pytest.mark.asyncio
    async def test_wrong_basic_password_is_invalid_credentials(
        self, authenticator, user_repo, password_user
    ):
        user_repo.seed(password_user)

        with pytest.raises(InvalidCredentialsError):
            await authenticator.authenticate(basic("alice@example.com", "nope"))

    @pytest.mark.asyncio
    async def test_malformed_basic_value_is_invalid_credentials(self, authenticator):
        with pytest.raises(InvalidCredentialsError):
            await authenticator.authenticate(
                CredentialEnvelope(CredentialScheme.BASIC, "%%%not-base64")
            )

    @pytest.mark.asyncio
    async def test_session_token_of_deactivated_user_is_rejected(
        self, authenticator, user_repo, password_user, session_tokens
    ):
        token = session_tokens.issue(password_user.id.value)
        password_user.is_active = False
        user_repo.seed(password_user)

        with pytest.raises(InvalidCredentialsError):
            await authenticator.authenticate(bearer(token.value))


class TestFederatedTokenStrategy:
    @pytest.mark.asyncio
    async def test_foreign_bearer_token_goes_to_federated(
        self, authenticator, identity_provider, mock_probe
    ):
        identity_provider.seed(
            RemoteIdentity(id="user_fed", primary_email_address="fed@example.com")
        )

        principal = await authenticator.authenticate(bearer("valid:user_fed"))

        assert principal.federated_id == "user_fed"
        mock_probe.user_authenticated.assert_called_once_with(
            user_id=principal.id.value, strategy="federated"
        )

    @pytest.mark.asyncio
    async def test_federated_failure_does_not_fall_back(
        self, authenticator, user_repo, password_user, mock_probe
    ):
        user_repo.seed(password_user)

        with pytest.raises(InvalidCredentialsError):
            await authenticator.authenticate(bearer("garbage"))

        assert mock_probe.authentication_failed.call_args.kwargs["strategy"] == (
            "federated"
        )


class TestFailureCollapsing:
    @pytest.mark.asyncio
    async def test_unexpected_strategy_error_becomes_invalid_credentials(
        self, mock_probe
    ):
        strategy = MagicMock()
        strategy.name = "broken"
        strategy.matches.return_value = True
        strategy.validate = AsyncMock(side_effect=RuntimeError("db down"))
        authenticator = CompositeAuthenticator([strategy], probe=mock_probe)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await authenticator.authenticate(bearer("x"))

        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_first_matching_strategy_wins(self, mock_probe):
        user = User(id=UserId.generate(), email="first@example.com")
        first = MagicMock()
        first.name = "first"
        first.matches.return_value = True
        first.validate = AsyncMock(return_value=user)
        second = MagicMock()
        second.name = "second"
        second.matches.return_value = True
        second.validate = AsyncMock()
        authenticator = CompositeAuthenticator([first, second], probe=mock_probe)

        assert await authenticator.authenticate(bearer("x")) is user
        second.validate.assert_not_awaited()

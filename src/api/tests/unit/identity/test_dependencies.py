"""Unit tests for the identity FastAPI providers."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from identity.application.value_objects import CredentialEnvelope, CredentialScheme
from identity.dependencies import federated, user
from identity.dependencies.authentication import get_authenticator, get_credentials
from identity.infrastructure.identity_provider_client import IdentityProviderClient
from infrastructure.settings import AuthSettings, IdentityProviderSettings
from shared_kernel.auth import FederatedTokenValidator, SessionTokenService


@pytest.fixture
def idp_settings() -> IdentityProviderSettings:
    return IdentityProviderSettings(
        secret_key=SecretStr("sk_test"),
        issuer_url="https://clerk.example.com",
        authorized_parties=["https://app.example.com"],
        _env_file=None,
    )


@pytest.fixture(autouse=True)
def clear_provider_caches():
    caches = (
        federated.get_federated_token_validator,
        federated.get_identity_provider_client,
        user.get_session_token_service,
    )
    for cache in caches:
        cache.cache_clear()
    yield
    for cache in caches:
        cache.cache_clear()


class TestGetCredentials:
    def test_authorization_header(self):
        assert get_credentials(authorization="Bearer tok") == CredentialEnvelope(
            CredentialScheme.BEARER, "tok"
        )

    def test_x_api_key_header(self):
        envelope = get_credentials(authorization=None, x_api_key="pcls_abc")

        assert envelope.scheme is CredentialScheme.API_KEY

    def test_nothing_presented(self):
        assert get_credentials(authorization=None, x_api_key=None) is None


class TestSessionTokenService:
    def test_built_from_auth_settings_and_cached(self):
        settings = AuthSettings(
            session_secret=SecretStr("x" * 32),
            session_issuer="portcullis-unit",
            _env_file=None,
        )
        with patch.object(user, "get_auth_settings", return_value=settings):
            service = user.get_session_token_service()

            assert isinstance(service, SessionTokenService)
            assert service.issuer == "portcullis-unit"
            assert user.get_session_token_service() is service


class TestFederatedProviders:
    def test_token_validator_is_shared(self, idp_settings):
        with patch.object(
            federated, "get_identity_provider_settings", return_value=idp_settings
        ):
            validator = federated.get_federated_token_validator()

            assert isinstance(validator, FederatedTokenValidator)
            assert federated.get_federated_token_validator() is validator

    def test_identity_provider_is_the_cached_client(self, idp_settings):
        with patch.object(
            federated, "get_identity_provider_settings", return_value=idp_settings
        ):
            provider = federated.get_identity_provider()

            assert isinstance(provider, IdentityProviderClient)
            assert federated.get_identity_provider() is provider

    @pytest.mark.asyncio
    async def test_close_releases_client(self, idp_settings):
        with patch.object(
            federated, "get_identity_provider_settings", return_value=idp_settings
        ):
            first = federated.get_identity_provider_client()

            await federated.close_identity_provider_client()

            assert federated.get_identity_provider_client.cache_info().currsize == 0
            assert federated.get_identity_provider_client() is not first

    @pytest.mark.asyncio
    async def test_close_without_client_is_a_no_op(self):
        await federated.close_identity_provider_client()

        assert federated.get_identity_provider_client.cache_info().currsize == 0


class TestGetAuthenticator:
    def test_strategies_in_dispatch_order(self):
        authenticator = get_authenticator(
            api_key_service=MagicMock(),
            federated_service=MagicMock(),
            password_service=MagicMock(),
            session_tokens=MagicMock(),
            probe=MagicMock(),
        )

        assert authenticator.strategy_names == ("api_key", "federated", "password")

"""Composite authentication over three credential strategies.

A request is handled by exactly one strategy, chosen from the shape of
the presented credential, in this fixed order:

1. API key     - ``Api-Key``/``X-API-Key`` credentials, or bearer values
                 carrying the API key prefix
2. Federated   - bearer tokens that are not our own session tokens
3. Password    - bearer session tokens and HTTP Basic email/password

If the chosen strategy fails the request is rejected; there is no fallback
to a later strategy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from identity.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from identity.application.security import looks_like_api_key
from identity.application.services import (
    APIKeyService,
    FederatedIdentityService,
    PasswordAuthService,
)
from identity.application.value_objects import CredentialEnvelope, CredentialScheme
from identity.domain.aggregates import User
from identity.ports.exceptions import InvalidCredentialsError, UnauthorizedError
from shared_kernel.auth import SessionTokenService

MISSING_CREDENTIALS_MESSAGE = "Missing credentials"


class AuthenticationStrategy(Protocol):
    """One way of turning a credential into a principal."""

    name: str

    def matches(self, envelope: CredentialEnvelope) -> bool:
        """Whether this strategy handles credentials of this shape."""
        ...

    async def validate(self, envelope: CredentialEnvelope) -> User:
        """Resolve the principal or raise."""
        ...


class APIKeyStrategy:
    name = "api_key"

    def __init__(self, api_key_service: APIKeyService):
        self._api_key_service = api_key_service

    def matches(self, envelope: CredentialEnvelope) -> bool:
        if envelope.scheme is CredentialScheme.API_KEY:
            return True
        return envelope.scheme is CredentialScheme.BEARER and looks_like_api_key(
            envelope.value
        )

    async def validate(self, envelope: CredentialEnvelope) -> User:
        return await self._api_key_service.validate(envelope.value)


class FederatedTokenStrategy:
    name = "federated"

    def __init__(
        self,
        federated_service: FederatedIdentityService,
        session_tokens: SessionTokenService,
    ):
        self._federated_service = federated_service
        self._session_tokens = session_tokens

    def matches(self, envelope: CredentialEnvelope) -> bool:
        return envelope.scheme is CredentialScheme.BEARER and not (
            self._session_tokens.is_session_token(envelope.value)
        )

    async def validate(self, envelope: CredentialEnvelope) -> User:
        return await self._federated_service.validate(envelope.value)


class PasswordSessionStrategy:
    name = "password"

    def __init__(
        self,
        password_service: PasswordAuthService,
        session_tokens: SessionTokenService,
    ):
        self._password_service = password_service
        self._session_tokens = session_tokens

    def matches(self, envelope: CredentialEnvelope) -> bool:
        if envelope.scheme is CredentialScheme.BASIC:
            return True
        return envelope.scheme is CredentialScheme.BEARER and (
            self._session_tokens.is_session_token(envelope.value)
        )

    async def validate(self, envelope: CredentialEnvelope) -> User:
        if envelope.scheme is CredentialScheme.BASIC:
            pair = envelope.basic_credentials()
            if pair is None:
                raise InvalidCredentialsError()
            email, password = pair
            return await self._password_service.authenticate_password(email, password)
        return await self._password_service.authenticate_session_token(envelope.value)


class CompositeAuthenticator:
    """Dispatches a credential envelope to the first matching strategy.

    Any failure of the chosen strategy, whatever its cause, becomes
    ``InvalidCredentialsError`` so that responses never reveal which
    factor was wrong.
    """

    def __init__(
        self,
        strategies: Sequence[AuthenticationStrategy],
        probe: AuthenticationProbe | None = None,
    ):
        self._strategies = tuple(strategies)
        self._probe = probe or DefaultAuthenticationProbe()

    @property
    def strategy_names(self) -> tuple[str, ...]:
        return tuple(strategy.name for strategy in self._strategies)

    async def authenticate(self, envelope: CredentialEnvelope | None) -> User:
        """Resolve the principal for ``envelope``.

        Raises:
            UnauthorizedError: If no credential is present or no strategy
                accepts its shape
            InvalidCredentialsError: If the chosen strategy rejects it
        """
        if envelope is None:
            self._probe.authentication_failed(reason="no_credentials")
            raise UnauthorizedError(MISSING_CREDENTIALS_MESSAGE)

        strategy = next((s for s in self._strategies if s.matches(envelope)), None)
        if strategy is None:
            self._probe.authentication_failed(reason=f"unsupported_{envelope.scheme}")
            raise UnauthorizedError(MISSING_CREDENTIALS_MESSAGE)

        try:
            user = await strategy.validate(envelope)
        except Exception as e:
            self._probe.authentication_failed(
                reason=f"{type(e).__name__}: {e}", strategy=strategy.name
            )
            raise InvalidCredentialsError() from e

        self._probe.user_authenticated(user_id=user.id.value, strategy=strategy.name)
        return user

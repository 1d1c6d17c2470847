"""FastAPI providers for the identity provider integration."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultFederatedIdentityProbe,
    FederatedIdentityProbe,
)
from identity.application.services import FederatedIdentityService
from identity.dependencies.user import get_user_repository
from identity.infrastructure.identity_provider_client import IdentityProviderClient
from identity.infrastructure.user_repository import UserRepository
from identity.ports.identity_provider import IIdentityProvider
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_identity_provider_settings
from shared_kernel.auth import DefaultJWTValidatorProbe, FederatedTokenValidator


@lru_cache
def get_federated_token_validator() -> FederatedTokenValidator:
    """Get cached federated token validator.

    A single instance is reused across requests so that its JWKS cache is
    shared.
    """
    settings = get_identity_provider_settings()
    return FederatedTokenValidator(
        issuer_url=settings.issuer_url,
        probe=DefaultJWTValidatorProbe(),
        audience=settings.audience,
        authorized_parties=settings.authorized_parties,
        jwks_cache_ttl=settings.jwks_cache_ttl,
        timeout_seconds=settings.timeout_seconds,
    )


@lru_cache
def get_identity_provider_client() -> IdentityProviderClient:
    """Get the cached identity provider client (one connection pool per process)."""
    settings = get_identity_provider_settings()
    return IdentityProviderClient(
        api_url=settings.api_url,
        secret_key=settings.secret_key.get_secret_value(),
        timeout_seconds=settings.timeout_seconds,
    )


def get_identity_provider() -> IIdentityProvider:
    return get_identity_provider_client()


async def close_identity_provider_client() -> None:
    """Close the cached client, if one was created."""
    if get_identity_provider_client.cache_info().currsize:
        await get_identity_provider_client().aclose()
        get_identity_provider_client.cache_clear()


def get_federated_identity_probe() -> FederatedIdentityProbe:
    return DefaultFederatedIdentityProbe()


def get_federated_identity_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    token_validator: Annotated[
        FederatedTokenValidator, Depends(get_federated_token_validator)
    ],
    probe: Annotated[FederatedIdentityProbe, Depends(get_federated_identity_probe)],
) -> FederatedIdentityService:
    return FederatedIdentityService(
        session=session,
        user_repository=user_repo,
        identity_provider=identity_provider,
        token_validator=token_validator,
        probe=probe,
    )

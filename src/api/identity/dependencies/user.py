"""FastAPI providers for user persistence and the password/profile services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultPasswordAuthProbe,
    DefaultUserServiceProbe,
    PasswordAuthProbe,
    UserServiceProbe,
)
from identity.application.services import PasswordAuthService, UserService
from identity.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import DefaultSessionTokenProbe, SessionTokenService


@lru_cache
def get_session_token_service() -> SessionTokenService:
    """Get the cached session token service configured from auth settings."""
    settings = get_auth_settings()
    return SessionTokenService(
        secret=settings.session_secret.get_secret_value(),
        issuer=settings.session_issuer,
        probe=DefaultSessionTokenProbe(),
        ttl=settings.session_ttl,
    )


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    return UserRepository(session=session)


def get_password_auth_probe() -> PasswordAuthProbe:
    return DefaultPasswordAuthProbe()


def get_user_service_probe() -> UserServiceProbe:
    return DefaultUserServiceProbe()


def get_password_auth_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session_tokens: Annotated[SessionTokenService, Depends(get_session_token_service)],
    probe: Annotated[PasswordAuthProbe, Depends(get_password_auth_probe)],
) -> PasswordAuthService:
    """Get PasswordAuthService instance.

    The repository shares the request's session via FastAPI dependency caching.
    """
    return PasswordAuthService(
        session=session,
        user_repository=user_repo,
        session_tokens=session_tokens,
        bcrypt_rounds=get_auth_settings().bcrypt_rounds,
        probe=probe,
    )


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    return UserService(session=session, user_repository=user_repo, probe=probe)

"""Request authentication and role gating for FastAPI routes.

Handlers receive the authenticated principal as an explicit argument:

    @router.get("/things")
    async def list_things(
        principal: Annotated[User, Depends(require_roles(Role.USER))],
    ): ...
"""

from typing import Annotated, Callable

from fastapi import Depends, Header, HTTPException, status

from identity.application.authentication import (
    APIKeyStrategy,
    CompositeAuthenticator,
    FederatedTokenStrategy,
    PasswordSessionStrategy,
)
from identity.application.authorization import RoleGate
from identity.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from identity.application.services import (
    APIKeyService,
    FederatedIdentityService,
    PasswordAuthService,
)
from identity.application.value_objects import CredentialEnvelope
from identity.dependencies.api_key import get_api_key_service
from identity.dependencies.federated import get_federated_identity_service
from identity.dependencies.user import (
    get_password_auth_service,
    get_session_token_service,
)
from identity.domain.aggregates import User
from identity.domain.value_objects import Role
from identity.ports.exceptions import ForbiddenError, UnauthorizedError
from shared_kernel.auth import SessionTokenService

WWW_AUTHENTICATE = "Bearer, Api-Key, Basic"


def get_authentication_probe() -> AuthenticationProbe:
    return DefaultAuthenticationProbe()


def get_credentials(
    authorization: Annotated[str | None, Header()] = None,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> CredentialEnvelope | None:
    """Extract the presented credential, if any, from request headers."""
    return CredentialEnvelope.from_headers(authorization, x_api_key)


def get_authenticator(
    api_key_service: Annotated[APIKeyService, Depends(get_api_key_service)],
    federated_service: Annotated[
        FederatedIdentityService, Depends(get_federated_identity_service)
    ],
    password_service: Annotated[PasswordAuthService, Depends(get_password_auth_service)],
    session_tokens: Annotated[SessionTokenService, Depends(get_session_token_service)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> CompositeAuthenticator:
    """Build the authenticator with its strategies in dispatch order."""
    return CompositeAuthenticator(
        strategies=[
            APIKeyStrategy(api_key_service),
            FederatedTokenStrategy(federated_service, session_tokens),
            PasswordSessionStrategy(password_service, session_tokens),
        ],
        probe=probe,
    )


async def get_current_principal(
    authenticator: Annotated[CompositeAuthenticator, Depends(get_authenticator)],
    credentials: Annotated[CredentialEnvelope | None, Depends(get_credentials)],
) -> User:
    """Authenticate the request.

    FastAPI caches the result per request, so the role gate and the handler
    share one authentication.

    Raises:
        HTTPException 401: If no credential is presented or it is rejected
    """
    try:
        return await authenticator.authenticate(credentials)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": WWW_AUTHENTICATE},
        ) from e


def require_roles(*roles: Role | str) -> Callable[..., User]:
    """Dependency factory admitting principals with any of ``roles``.

    With no roles, any authenticated principal is admitted. Authentication
    always runs before the role check.
    """
    gate = RoleGate(roles)

    def _require(
        principal: Annotated[User, Depends(get_current_principal)],
    ) -> User:
        try:
            return gate.check(principal)
        except ForbiddenError as e:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=e.message,
            ) from e

    return _require

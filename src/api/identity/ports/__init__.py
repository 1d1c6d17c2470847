"""Ports (interfaces) for the identity bounded context.

Ports define the contracts for repositories and external services without
specifying implementation details.
"""

from identity.ports.exceptions import (
    APIKeyNotFoundError,
    BadRequestError,
    ConflictError,
    DuplicateFederatedIdError,
    EmailAlreadyRegisteredError,
    ForbiddenError,
    IdentityError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    RemoteUserNotFoundError,
    UnauthorizedError,
    UserNotFoundError,
)
from identity.ports.identity_provider import (
    IdentityProviderError,
    IIdentityProvider,
    RemoteIdentity,
    RemoteIdentityChanges,
    RemoteIdentityDraft,
    RemoteUserQuery,
)
from identity.ports.repositories import IAPIKeyRepository, IUserRepository

__all__ = [
    "APIKeyNotFoundError",
    "BadRequestError",
    "ConflictError",
    "DuplicateFederatedIdError",
    "EmailAlreadyRegisteredError",
    "ForbiddenError",
    "IAPIKeyRepository",
    "IIdentityProvider",
    "IUserRepository",
    "IdentityError",
    "IdentityProviderError",
    "InternalError",
    "InvalidCredentialsError",
    "NotFoundError",
    "RemoteIdentity",
    "RemoteIdentityChanges",
    "RemoteIdentityDraft",
    "RemoteUserNotFoundError",
    "RemoteUserQuery",
    "UnauthorizedError",
    "UserNotFoundError",
]

"""Application services for the identity bounded context.

Application services orchestrate domain aggregates, repositories, and
external collaborators to fulfill use cases.
"""

from identity.application.services.api_key_service import APIKeyService
from identity.application.services.federated_identity_service import (
    FederatedIdentityService,
)
from identity.application.services.password_auth_service import PasswordAuthService
from identity.application.services.uniqueness import ensure_email_available
from identity.application.services.user_service import UserService

__all__ = [
    "APIKeyService",
    "FederatedIdentityService",
    "PasswordAuthService",
    "UserService",
    "ensure_email_available",
]

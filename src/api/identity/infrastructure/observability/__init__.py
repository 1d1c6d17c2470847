"""Domain-Oriented Observability for identity infrastructure."""

from identity.infrastructure.observability.identity_provider_probe import (
    DefaultIdentityProviderProbe,
    IdentityProviderProbe,
)
from identity.infrastructure.observability.repository_probe import (
    APIKeyRepositoryProbe,
    DefaultAPIKeyRepositoryProbe,
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "APIKeyRepositoryProbe",
    "DefaultAPIKeyRepositoryProbe",
    "DefaultIdentityProviderProbe",
    "DefaultUserRepositoryProbe",
    "IdentityProviderProbe",
    "UserRepositoryProbe",
]

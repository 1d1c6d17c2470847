"""Domain-Oriented Observability for the identity application layer."""

from identity.application.observability.api_key_service_probe import (
    APIKeyServiceProbe,
    DefaultAPIKeyServiceProbe,
)
from identity.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from identity.application.observability.federated_identity_probe import (
    DefaultFederatedIdentityProbe,
    FederatedIdentityProbe,
)
from identity.application.observability.password_auth_probe import (
    DefaultPasswordAuthProbe,
    PasswordAuthProbe,
)
from identity.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "APIKeyServiceProbe",
    "AuthenticationProbe",
    "DefaultAPIKeyServiceProbe",
    "DefaultAuthenticationProbe",
    "DefaultFederatedIdentityProbe",
    "DefaultPasswordAuthProbe",
    "DefaultUserServiceProbe",
    "FederatedIdentityProbe",
    "PasswordAuthProbe",
    "UserServiceProbe",
]

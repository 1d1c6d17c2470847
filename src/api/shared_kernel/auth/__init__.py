"""Authentication shared kernel module."""

from shared_kernel.auth.jwt_validator import (
    FederatedTokenClaims,
    FederatedTokenValidator,
    InvalidTokenError,
)
from shared_kernel.auth.observability import (
    DefaultJWTValidatorProbe,
    DefaultSessionTokenProbe,
    JWTValidatorProbe,
    SessionTokenProbe,
)
from shared_kernel.auth.session_token import (
    SessionClaims,
    SessionToken,
    SessionTokenService,
)

__all__ = [
    "DefaultJWTValidatorProbe",
    "DefaultSessionTokenProbe",
    "FederatedTokenClaims",
    "FederatedTokenValidator",
    "InvalidTokenError",
    "JWTValidatorProbe",
    "SessionClaims",
    "SessionToken",
    "SessionTokenProbe",
    "SessionTokenService",
]

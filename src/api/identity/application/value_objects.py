"""Application-layer value objects for the identity bounded context.

These represent the authentication context of a request rather than core
business entities.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from identity.domain.aggregates import User


class CredentialScheme(StrEnum):
    """The form in which a credential was presented."""

    API_KEY = "api-key"
    BEARER = "bearer"
    BASIC = "basic"


@dataclass(frozen=True)
class CredentialEnvelope:
    """A credential extracted from request headers, not yet verified.

    Recognised forms:
        Authorization: Api-Key <key>
        X-API-Key: <key>
        Authorization: Bearer <token>
        Authorization: Basic <base64(email:password)>
    """

    scheme: CredentialScheme
    value: str

    def __repr__(self) -> str:
        return f"CredentialEnvelope(scheme={self.scheme.value!r}, value='***')"

    @classmethod
    def from_headers(
        cls, authorization: str | None, x_api_key: str | None = None
    ) -> CredentialEnvelope | None:
        """Parse request headers; None when no recognised credential is present.

        The ``Authorization`` header wins over ``X-API-Key`` when both are sent.
        """
        if authorization and authorization.strip():
            scheme, _, value = authorization.strip().partition(" ")
            value = value.strip()
            if not value:
                return None
            match scheme.lower():
                case "api-key":
                    return cls(CredentialScheme.API_KEY, value)
                case "bearer":
                    return cls(CredentialScheme.BEARER, value)
                case "basic":
                    return cls(CredentialScheme.BASIC, value)
                case _:
                    return None

        if x_api_key and x_api_key.strip():
            return cls(CredentialScheme.API_KEY, x_api_key.strip())

        return None

    def basic_credentials(self) -> tuple[str, str] | None:
        """Decode ``email:password`` from a Basic credential, or None if malformed."""
        if self.scheme is not CredentialScheme.BASIC:
            return None
        try:
            decoded = base64.b64decode(self.value, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None
        email, sep, password = decoded.partition(":")
        if not sep:
            return None
        return email, password


@dataclass(frozen=True)
class SessionGrant:
    """Result of a successful login or token refresh."""

    principal: User
    access_token: str
    expires_at: datetime

"""Verification of identity-provider issued JWTs.

Federated tokens are signed by the identity provider with an RSA key that
is published through OIDC discovery. Keys are cached for a configurable
TTL so that verification normally costs no network round trip.
"""

from __future__ import annotations

import asyncio
from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

FEDERATED_ALGORITHMS = ("RS256",)


@dataclass(frozen=True)
class FederatedTokenClaims:
    """Claims the application relies on from a verified federated token."""

    sub: str
    authorized_party: str | None = None
    session_id: str | None = None


class InvalidTokenError(Exception):
    """Raised when a token cannot be trusted.

    Covers malformed tokens, bad signatures, expired tokens, claim
    mismatches and failures to obtain the provider's signing keys.
    """

    pass


class FederatedTokenValidator:
    """Validates identity-provider JWTs against the provider's JWKS.

    The JWKS location is discovered from
    ``{issuer_url}/.well-known/openid-configuration``. Signature, expiry,
    issuer, and (when configured) audience and authorized party are
    verified. No retries are attempted: a provider outage surfaces as
    ``InvalidTokenError`` on the request that observed it.
    """

    def __init__(
        self,
        issuer_url: str,
        probe: JWTValidatorProbe,
        audience: str | None = None,
        authorized_parties: Collection[str] = (),
        jwks_cache_ttl: timedelta = timedelta(hours=1),
        timeout_seconds: float = 5.0,
    ):
        """Initialize the validator.

        Args:
            issuer_url: The provider's issuer URL (the ``iss`` claim value).
            probe: Observability probe for logging events.
            audience: Expected ``aud`` claim, or None to skip the check.
            authorized_parties: Accepted ``azp`` values; empty skips the check.
            jwks_cache_ttl: How long fetched keys stay valid.
            timeout_seconds: Timeout for discovery and JWKS requests.
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._probe = probe
        self._audience = audience
        self._authorized_parties = frozenset(authorized_parties)
        self._jwks_cache_ttl = jwks_cache_ttl
        self._timeout = timeout_seconds

        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at: datetime | None = None
        self._jwks_lock = asyncio.Lock()

    async def validate_token(self, token: str) -> FederatedTokenClaims:
        """Validate a federated JWT and return its claims.

        Raises:
            InvalidTokenError: If the token is not trustworthy for any reason.
        """
        try:
            unverified_header = jwt.get_unverified_header(token)
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"Malformed token: {e}")
            raise InvalidTokenError(f"Invalid token format: {e}") from e

        if not unverified_header:
            self._probe.token_validation_failed(reason="Missing token header")
            raise InvalidTokenError("Invalid token: missing header")

        jwks = await self._get_jwks()

        try:
            claims = jwt.decode(
                token=token,
                key=jwks,
                algorithms=list(FEDERATED_ALGORITHMS),
                audience=self._audience,
                issuer=self._issuer_url,
                options={
                    "verify_signature": True,
                    "verify_aud": self._audience is not None,
                    "verify_iss": True,
                    "verify_exp": True,
                    "verify_iat": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            error_msg = str(e).lower()
            if "audience" in error_msg:
                self._probe.token_validation_failed(reason="Invalid audience")
                raise InvalidTokenError("Invalid audience claim") from e
            if "issuer" in error_msg:
                self._probe.token_validation_failed(reason="Invalid issuer")
                raise InvalidTokenError("Invalid issuer claim") from e
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            error_msg = str(e).lower()
            if "signature" in error_msg:
                self._probe.token_validation_failed(reason="Invalid signature")
                raise InvalidTokenError("Invalid token signature") from e
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        subject = claims.get("sub")
        if not subject:
            self._probe.token_validation_failed(reason="Missing sub claim")
            raise InvalidTokenError("Missing required claim: sub")

        authorized_party = claims.get("azp")
        if self._authorized_parties and authorized_party not in self._authorized_parties:
            self._probe.token_validation_failed(reason="Invalid authorized party")
            raise InvalidTokenError("Invalid authorized party claim")

        self._probe.token_validated(user_id=str(subject))

        return FederatedTokenClaims(
            sub=str(subject),
            authorized_party=authorized_party,
            session_id=claims.get("sid"),
        )

    async def _get_jwks(self) -> dict[str, Any]:
        """Get JWKS, fetching from the issuer if the cache expired."""
        if self._is_cache_valid():
            self._probe.jwks_cache_hit()
            return self._jwks  # type: ignore[return-value]

        async with self._jwks_lock:
            # Another request may have refreshed the cache while we waited
            if self._is_cache_valid():
                self._probe.jwks_cache_hit()
                return self._jwks  # type: ignore[return-value]

            return await self._fetch_jwks()

    def _is_cache_valid(self) -> bool:
        if self._jwks is None or self._jwks_fetched_at is None:
            return False

        now = datetime.now(tz=timezone.utc)
        return (now - self._jwks_fetched_at) < self._jwks_cache_ttl

    async def _fetch_jwks(self) -> dict[str, Any]:
        """Fetch JWKS via the provider's OpenID Connect discovery document.

        Raises:
            InvalidTokenError: If JWKS cannot be fetched.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                config_response = await client.get(
                    f"{self._issuer_url}/.well-known/openid-configuration"
                )
                config_response.raise_for_status()
                openid_config = config_response.json()

                jwks_uri = openid_config.get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "Identity provider missing jwks_uri in configuration"
                    )

                jwks_response = await client.get(jwks_uri)
                jwks_response.raise_for_status()
                jwks = jwks_response.json()

        except httpx.HTTPError as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(
                f"Failed to fetch JWKS from identity provider: {e}"
            ) from e
        except ValueError as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(f"Unreadable JWKS response: {e}") from e

        self._jwks = jwks
        self._jwks_fetched_at = datetime.now(tz=timezone.utc)
        self._probe.jwks_fetched(key_count=len(jwks.get("keys", [])))
        return jwks

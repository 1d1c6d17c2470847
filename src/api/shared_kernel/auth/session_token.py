"""Session tokens issued by this service.

Session tokens are HS256 JWTs carrying the user id as ``sub``. They are
checked by signature and expiry only; revocation happens by deactivating
the account, which the authentication strategies check on every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from shared_kernel.auth.jwt_validator import InvalidTokenError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SessionTokenProbe

SESSION_ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"
DEFAULT_SESSION_TTL = timedelta(hours=12)


@dataclass(frozen=True)
class SessionToken:
    """A freshly signed session token and its expiry."""

    value: str
    expires_at: datetime


@dataclass(frozen=True)
class SessionClaims:
    """Verified claims of a session token."""

    sub: str
    issued_at: datetime
    expires_at: datetime


class SessionTokenService:
    """Signs and verifies session tokens with a shared secret."""

    def __init__(
        self,
        secret: str,
        issuer: str,
        probe: SessionTokenProbe,
        ttl: timedelta = DEFAULT_SESSION_TTL,
    ):
        self._secret = secret
        self._issuer = issuer
        self._probe = probe
        self._ttl = ttl

    @property
    def issuer(self) -> str:
        return self._issuer

    def issue(self, subject: str) -> SessionToken:
        """Sign a session token bound to ``subject``."""
        now = datetime.now(UTC)
        expires_at = now + self._ttl
        claims = {
            "sub": subject,
            "iss": self._issuer,
            "typ": SESSION_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret, algorithm=SESSION_ALGORITHM)
        self._probe.session_token_issued(user_id=subject)
        return SessionToken(value=token, expires_at=expires_at)

    def verify(self, token: str) -> SessionClaims:
        """Verify signature and expiry of a session token.

        Raises:
            InvalidTokenError: If the token is expired, tampered with or foreign.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[SESSION_ALGORITHM],
                issuer=self._issuer,
                options={"verify_aud": False},
            )
        except ExpiredSignatureError as e:
            self._probe.session_token_rejected(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTError as e:
            self._probe.session_token_rejected(reason=str(e))
            raise InvalidTokenError(f"Invalid session token: {e}") from e

        subject = claims.get("sub")
        if not subject or claims.get("typ") != SESSION_TOKEN_TYPE:
            self._probe.session_token_rejected(reason="Unexpected claims")
            raise InvalidTokenError("Invalid session token claims")

        return SessionClaims(
            sub=str(subject),
            issued_at=datetime.fromtimestamp(claims["iat"], UTC),
            expires_at=datetime.fromtimestamp(claims["exp"], UTC),
        )

    def is_session_token(self, token: str) -> bool:
        """Tell whether ``token`` has the shape of one of our session tokens.

        Only the unverified header and claims are inspected. This decides
        which strategy handles a bearer token; it grants nothing.
        """
        try:
            header = jwt.get_unverified_header(token)
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return False

        return (
            header.get("alg") == SESSION_ALGORITHM
            and claims.get("iss") == self._issuer
            and claims.get("typ") == SESSION_TOKEN_TYPE
        )

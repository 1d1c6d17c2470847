"""Domain probes for token verification and issuance.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to federated JWT verification and
session token handling.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class JWTValidatorProbe(Protocol):
    """Domain probe for federated JWT verification."""

    def token_validated(self, user_id: str) -> None:
        """Record that a token was successfully validated."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        ...

    def jwks_fetched(self, key_count: int) -> None:
        """Record that JWKS was fetched from the issuer."""
        ...

    def jwks_cache_hit(self) -> None:
        """Record that JWKS was served from cache."""
        ...

    def jwks_fetch_failed(self, error: str) -> None:
        """Record that JWKS fetch failed."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultJWTValidatorProbe:
    """Default implementation of JWTValidatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultJWTValidatorProbe:
        """Create a new probe with observation context bound."""
        return DefaultJWTValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, user_id: str) -> None:
        self._logger.info(
            "federated_token_validated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        self._logger.warning(
            "federated_token_validation_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def jwks_fetched(self, key_count: int) -> None:
        self._logger.info(
            "federated_jwks_fetched",
            key_count=key_count,
            **self._get_context_kwargs(),
        )

    def jwks_cache_hit(self) -> None:
        self._logger.debug(
            "federated_jwks_cache_hit",
            **self._get_context_kwargs(),
        )

    def jwks_fetch_failed(self, error: str) -> None:
        self._logger.error(
            "federated_jwks_fetch_failed",
            error=error,
            **self._get_context_kwargs(),
        )


class SessionTokenProbe(Protocol):
    """Domain probe for session token issuance and verification."""

    def session_token_issued(self, user_id: str) -> None:
        """Record that a session token was signed for a user."""
        ...

    def session_token_rejected(self, reason: str) -> None:
        """Record that a presented session token failed verification."""
        ...

    def with_context(self, context: ObservationContext) -> SessionTokenProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSessionTokenProbe:
    """Default implementation of SessionTokenProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultSessionTokenProbe:
        return DefaultSessionTokenProbe(logger=self._logger, context=context)

    def session_token_issued(self, user_id: str) -> None:
        self._logger.info(
            "session_token_issued",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def session_token_rejected(self, reason: str) -> None:
        self._logger.warning(
            "session_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

"""Protocol for authentication and authorization observability.

Captures the outcome of the composite authenticator and the role gate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthenticationProbe(Protocol):
    """Domain probe for authentication operations."""

    def user_authenticated(self, user_id: str, strategy: str) -> None:
        """Record that a strategy resolved a principal."""
        ...

    def authentication_failed(self, reason: str, strategy: str | None = None) -> None:
        """Record authentication failure.

        Args:
            reason: Internal failure reason, never returned to the caller
            strategy: The strategy that was attempted, if any
        """
        ...

    def authorization_denied(self, user_id: str, required_roles: list[str]) -> None:
        """Record that the role gate rejected an authenticated principal."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationProbe:
    """Default implementation of AuthenticationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthenticationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthenticationProbe(logger=self._logger, context=context)

    def user_authenticated(self, user_id: str, strategy: str) -> None:
        self._logger.info(
            "user_authenticated",
            user_id=user_id,
            strategy=strategy,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, reason: str, strategy: str | None = None) -> None:
        self._logger.warning(
            "authentication_failed",
            reason=reason,
            strategy=strategy,
            **self._get_context_kwargs(),
        )

    def authorization_denied(self, user_id: str, required_roles: list[str]) -> None:
        self._logger.warning(
            "authorization_denied",
            user_id=user_id,
            required_roles=required_roles,
            **self._get_context_kwargs(),
        )

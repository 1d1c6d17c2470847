"""Domain probe for calls to the identity provider's admin API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class IdentityProviderProbe(Protocol):
    """Domain probe for identity provider requests."""

    def request_succeeded(self, operation: str, status_code: int) -> None:
        """Record a successful provider call."""
        ...

    def remote_user_missing(self, operation: str, remote_id: str) -> None:
        """Record that the provider answered 404 for a user id."""
        ...

    def request_failed(
        self, operation: str, error: str, status_code: int | None = None
    ) -> None:
        """Record a transport failure or unexpected provider response."""
        ...

    def with_context(self, context: ObservationContext) -> IdentityProviderProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIdentityProviderProbe:
    """Default implementation of IdentityProviderProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultIdentityProviderProbe:
        return DefaultIdentityProviderProbe(logger=self._logger, context=context)

    def request_succeeded(self, operation: str, status_code: int) -> None:
        self._logger.debug(
            "identity_provider_request_succeeded",
            operation=operation,
            status_code=status_code,
            **self._get_context_kwargs(),
        )

    def remote_user_missing(self, operation: str, remote_id: str) -> None:
        self._logger.info(
            "identity_provider_user_missing",
            operation=operation,
            remote_id=remote_id,
            **self._get_context_kwargs(),
        )

    def request_failed(
        self, operation: str, error: str, status_code: int | None = None
    ) -> None:
        self._logger.error(
            "identity_provider_request_failed",
            operation=operation,
            error=error,
            status_code=status_code,
            **self._get_context_kwargs(),
        )

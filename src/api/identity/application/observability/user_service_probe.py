"""Protocol for user profile service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for self-service profile operations."""

    def profile_updated(self, user_id: str) -> None:
        """Record that a user changed their profile."""
        ...

    def account_deleted(self, user_id: str) -> None:
        """Record that a user deleted their account."""
        ...

    def users_listed(self, count: int) -> None:
        """Record that an admin listed users."""
        ...

    def operation_failed(
        self, operation: str, error: str, user_id: str | None = None
    ) -> None:
        """Record that a profile operation failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def profile_updated(self, user_id: str) -> None:
        self._logger.info(
            "profile_updated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def account_deleted(self, user_id: str) -> None:
        self._logger.info(
            "account_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def users_listed(self, count: int) -> None:
        self._logger.debug(
            "users_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def operation_failed(
        self, operation: str, error: str, user_id: str | None = None
    ) -> None:
        self._logger.error(
            "user_operation_failed",
            operation=operation,
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )

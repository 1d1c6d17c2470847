"""Protocol for password authentication observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PasswordAuthProbe(Protocol):
    """Domain probe for registration, login and session refresh."""

    def user_registered(self, user_id: str) -> None: ...

    def registration_failed(self, error: str) -> None: ...

    def login_succeeded(self, user_id: str) -> None: ...

    def login_failed(self, reason: str) -> None: ...

    def session_refreshed(self, user_id: str) -> None: ...

    def session_rejected(self, reason: str) -> None: ...

    def operation_failed(self, operation: str, error: str) -> None: ...

    def with_context(self, context: ObservationContext) -> PasswordAuthProbe: ...


class DefaultPasswordAuthProbe:
    """Default implementation of PasswordAuthProbe using structlog.

    Email addresses are deliberately absent from failure events.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultPasswordAuthProbe:
        return DefaultPasswordAuthProbe(logger=self._logger, context=context)

    def user_registered(self, user_id: str) -> None:
        self._logger.info(
            "user_registered", user_id=user_id, **self._get_context_kwargs()
        )

    def registration_failed(self, error: str) -> None:
        self._logger.error(
            "user_registration_failed", error=error, **self._get_context_kwargs()
        )

    def login_succeeded(self, user_id: str) -> None:
        self._logger.info(
            "login_succeeded", user_id=user_id, **self._get_context_kwargs()
        )

    def login_failed(self, reason: str) -> None:
        self._logger.warning(
            "login_failed", reason=reason, **self._get_context_kwargs()
        )

    def session_refreshed(self, user_id: str) -> None:
        self._logger.info(
            "session_refreshed", user_id=user_id, **self._get_context_kwargs()
        )

    def session_rejected(self, reason: str) -> None:
        self._logger.warning(
            "session_rejected", reason=reason, **self._get_context_kwargs()
        )

    def operation_failed(self, operation: str, error: str) -> None:
        self._logger.error(
            "password_auth_operation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

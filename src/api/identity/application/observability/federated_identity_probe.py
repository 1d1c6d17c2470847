"""Protocol for federated identity observability.

Covers token-driven resolution of shadow records and the administrative
operations that keep them in sync with the identity provider.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class FederatedIdentityProbe(Protocol):
    """Domain probe for federated identity operations."""

    def federated_user_resolved(self, user_id: str, federated_id: str) -> None:
        """Record that a federated token mapped to an existing shadow record."""
        ...

    def federated_user_provisioned(self, user_id: str, federated_id: str) -> None:
        """Record that a shadow record was created on first sight."""
        ...

    def provisioning_race_resolved(self, federated_id: str) -> None:
        """Record that a concurrent first login won and its row was reused."""
        ...

    def federated_validation_failed(self, reason: str) -> None:
        """Record that a federated credential was rejected."""
        ...

    def remote_user_created(self, remote_id: str, user_id: str) -> None:
        """Record that an admin created a remote identity and its shadow."""
        ...

    def remote_user_updated(self, remote_id: str, shadow_updated: bool) -> None:
        """Record that an admin updated a remote identity."""
        ...

    def remote_user_deleted(self, remote_id: str) -> None:
        """Record that an admin deleted a remote identity."""
        ...

    def local_shadow_missing(self, remote_id: str) -> None:
        """Record that a remote identity had no local shadow record."""
        ...

    def remote_operation_failed(self, operation: str, error: str) -> None:
        """Record that an administrative operation failed unexpectedly."""
        ...

    def store_operation_failed(self, operation: str, error: str) -> None:
        """Record that reading or writing a shadow record failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> FederatedIdentityProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultFederatedIdentityProbe:
    """Default implementation of FederatedIdentityProbe using structlog."""

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
    ) -> DefaultFederatedIdentityProbe:
        return DefaultFederatedIdentityProbe(logger=self._logger, context=context)

    def federated_user_resolved(self, user_id: str, federated_id: str) -> None:
        self._logger.debug(
            "federated_user_resolved",
            user_id=user_id,
            federated_id=federated_id,
            **self._get_context_kwargs(),
        )

    def federated_user_provisioned(self, user_id: str, federated_id: str) -> None:
        self._logger.info(
            "federated_user_provisioned",
            user_id=user_id,
            federated_id=federated_id,
            **self._get_context_kwargs(),
        )

    def provisioning_race_resolved(self, federated_id: str) -> None:
        self._logger.info(
            "federated_provisioning_race_resolved",
            federated_id=federated_id,
            **self._get_context_kwargs(),
        )

    def federated_validation_failed(self, reason: str) -> None:
        self._logger.warning(
            "federated_validation_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def remote_user_created(self, remote_id: str, user_id: str) -> None:
        self._logger.info(
            "remote_user_created",
            remote_id=remote_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def remote_user_updated(self, remote_id: str, shadow_updated: bool) -> None:
        self._logger.info(
            "remote_user_updated",
            remote_id=remote_id,
            shadow_updated=shadow_updated,
            **self._get_context_kwargs(),
        )

    def remote_user_deleted(self, remote_id: str) -> None:
        self._logger.info(
            "remote_user_deleted",
            remote_id=remote_id,
            **self._get_context_kwargs(),
        )

    def local_shadow_missing(self, remote_id: str) -> None:
        self._logger.warning(
            "local_shadow_missing",
            remote_id=remote_id,
            **self._get_context_kwargs(),
        )

    def remote_operation_failed(self, operation: str, error: str) -> None:
        self._logger.error(
            "remote_operation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

    def store_operation_failed(self, operation: str, error: str) -> None:
        self._logger.error(
            "federated_store_operation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

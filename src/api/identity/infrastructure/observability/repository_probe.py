"""Domain probes for identity repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: str) -> None:
        """Record that a user was inserted or updated."""
        ...

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, lookup: str) -> None:
        """Record that a lookup matched no visible user."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user row was deleted."""
        ...

    def uniqueness_violated(self, constraint: str) -> None:
        """Record that an insert or update hit a unique constraint."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, user_id: str) -> None:
        self._logger.info(
            "user_saved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: str) -> None:
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, lookup: str) -> None:
        self._logger.debug(
            "user_not_found",
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str) -> None:
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def uniqueness_violated(self, constraint: str) -> None:
        self._logger.warning(
            "user_uniqueness_violated",
            constraint=constraint,
            **self._get_context_kwargs(),
        )


class APIKeyRepositoryProbe(Protocol):
    """Domain probe for API key repository operations."""

    def api_key_saved(self, api_key_id: str, owner_id: str) -> None: ...

    def api_key_retrieved(self, api_key_id: str) -> None: ...

    def api_key_not_found(self, api_key_id: str | None = None) -> None: ...

    def api_key_list_retrieved(self, owner_id: str, count: int) -> None: ...

    def api_key_deleted(self, api_key_id: str, rowcount: int) -> None: ...

    def with_context(self, context: ObservationContext) -> APIKeyRepositoryProbe: ...


class DefaultAPIKeyRepositoryProbe:
    """Default implementation of APIKeyRepositoryProbe using structlog."""

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
    ) -> DefaultAPIKeyRepositoryProbe:
        return DefaultAPIKeyRepositoryProbe(logger=self._logger, context=context)

    def api_key_saved(self, api_key_id: str, owner_id: str) -> None:
        self._logger.info(
            "api_key_saved",
            api_key_id=api_key_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def api_key_retrieved(self, api_key_id: str) -> None:
        self._logger.debug(
            "api_key_retrieved",
            api_key_id=api_key_id,
            **self._get_context_kwargs(),
        )

    def api_key_not_found(self, api_key_id: str | None = None) -> None:
        self._logger.debug(
            "api_key_not_found",
            api_key_id=api_key_id,
            **self._get_context_kwargs(),
        )

    def api_key_list_retrieved(self, owner_id: str, count: int) -> None:
        self._logger.debug(
            "api_key_list_retrieved",
            owner_id=owner_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def api_key_deleted(self, api_key_id: str, rowcount: int) -> None:
        self._logger.info(
            "api_key_deleted",
            api_key_id=api_key_id,
            rowcount=rowcount,
            **self._get_context_kwargs(),
        )

"""Domain probes for infrastructure observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database engine lifecycle events."""

    def engine_created(self, host: str, database: str, pool_size: int) -> None:
        """Record that the async engine and its pool were created."""
        ...

    def schema_created(self, table_count: int) -> None:
        """Record that missing tables were created at startup."""
        ...

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, host: str, database: str, pool_size: int) -> None:
        self._logger.info(
            "database_engine_created",
            host=host,
            database=database,
            pool_size=pool_size,
            **self._get_context_kwargs(),
        )

    def schema_created(self, table_count: int) -> None:
        self._logger.info(
            "database_schema_created",
            table_count=table_count,
            **self._get_context_kwargs(),
        )

    def pool_closed(self) -> None:
        self._logger.info("database_pool_closed", **self._get_context_kwargs())


class StartupProbe(Protocol):
    """Domain probe for application lifecycle events."""

    def settings_loaded(self, app_name: str, debug: bool) -> None: ...

    def application_started(self, version: str) -> None: ...

    def application_stopped(self) -> None: ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def settings_loaded(self, app_name: str, debug: bool) -> None:
        self._logger.info("settings_loaded", app_name=app_name, debug=debug)

    def application_started(self, version: str) -> None:
        self._logger.info("application_started", version=version)

    def application_stopped(self) -> None:
        self._logger.info("application_stopped")

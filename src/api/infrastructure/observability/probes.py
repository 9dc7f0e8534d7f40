"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database connection observability.

    This probe captures domain-significant events related to database
    connections and the tenant binding of each transaction without
    exposing logging implementation details.
    """

    def pool_initialized(self, host: str, database: str, max_conn: int) -> None:
        """Record that the connection pool was initialized."""
        ...

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        ...

    def tenant_bound_to_transaction(self, tenant_id: str) -> None:
        """Record that a transaction was scoped to a tenant."""
        ...

    def transaction_without_tenant(self) -> None:
        """Record that a transaction started with no tenant to scope to."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def pool_initialized(self, host: str, database: str, max_conn: int) -> None:
        """Record that the connection pool was initialized."""
        self._logger.info(
            "connection_pool_initialized",
            host=host,
            database=database,
            max_connections=max_conn,
            **self._get_context_kwargs(),
        )

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        self._logger.info(
            "connection_pool_closed",
            **self._get_context_kwargs(),
        )

    def tenant_bound_to_transaction(self, tenant_id: str) -> None:
        """Record that a transaction was scoped to a tenant."""
        self._logger.debug(
            "transaction_tenant_bound",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def transaction_without_tenant(self) -> None:
        """Record that a transaction started with no tenant to scope to."""
        self._logger.debug(
            "transaction_tenant_unbound",
            message="Row-level security will hide all tenant-scoped rows",
            **self._get_context_kwargs(),
        )

"""Protocol for tenant application service observability.

Defines the interface for domain probes that capture application-level
domain events for tenant service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant application service operations."""

    def tenant_created(self, tenant_id: str, external_user_id: str) -> None:
        """Record that a tenant was created for a new identity."""
        ...

    def tenant_email_updated(self, tenant_id: str) -> None:
        """Record that a tenant's email was synchronized."""
        ...

    def tenant_sync_rejected(self, external_user_id: str, field: str) -> None:
        """Record that identity data failed validation."""
        ...

    def tenant_sync_failed(self, external_user_id: str, error: Exception) -> None:
        """Record an unexpected failure while synchronizing a tenant."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, external_user_id: str) -> None:
        """Record that a tenant was created for a new identity."""
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def tenant_email_updated(self, tenant_id: str) -> None:
        """Record that a tenant's email was synchronized."""
        self._logger.info(
            "tenant_email_updated",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_sync_rejected(self, external_user_id: str, field: str) -> None:
        """Record that identity data failed validation."""
        self._logger.warning(
            "tenant_sync_rejected",
            external_user_id=external_user_id,
            field=field,
            **self._get_context_kwargs(),
        )

    def tenant_sync_failed(self, external_user_id: str, error: Exception) -> None:
        """Record an unexpected failure while synchronizing a tenant."""
        self._logger.error(
            "tenant_sync_failed",
            external_user_id=external_user_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

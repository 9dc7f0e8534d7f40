"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving the caller's tenant from
their external identity.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved(self, tenant_id: str, user_id: str) -> None:
        """Record that the caller's tenant was resolved from their identity."""
        ...

    def anonymous_request(self) -> None:
        """Record that a request arrived without an authenticated caller."""
        ...

    def tenant_not_provisioned(self, user_id: str) -> None:
        """Record that an authenticated caller has no tenant yet."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_resolved(self, tenant_id: str, user_id: str) -> None:
        """Record that the caller's tenant was resolved from their identity."""
        self._logger.debug(
            "tenant_context_resolved",
            tenant_id=tenant_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def anonymous_request(self) -> None:
        """Record that a request arrived without an authenticated caller."""
        self._logger.debug(
            "tenant_context_anonymous",
            **self._get_context_kwargs(),
        )

    def tenant_not_provisioned(self, user_id: str) -> None:
        """Record that an authenticated caller has no tenant yet."""
        self._logger.warning(
            "tenant_context_not_provisioned",
            user_id=user_id,
            message="Caller is authenticated but has no tenant; sync the tenant first",
            **self._get_context_kwargs(),
        )

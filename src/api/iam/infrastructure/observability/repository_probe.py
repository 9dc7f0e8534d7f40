"""Domain probe for tenant persistence.

The tenants table is the one place where rows become visible through the
caller's external identity rather than through a tenant id, so the probe
records when that identity is exposed to the database as well as the
lookups and writes themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantRepositoryProbe(Protocol):
    """Domain probe for tenant repository operations."""

    def identity_exposed(self, external_user_id: str) -> None:
        """Record that the identity setting was set for the transaction."""
        ...

    def tenant_retrieved(self, tenant_id: str) -> None: ...

    def tenant_not_visible(self, lookup: str) -> None:
        """Record that no tenant row was visible for a lookup.

        Missing and policy-hidden rows are indistinguishable here.
        """
        ...

    def tenant_inserted(self, tenant_id: str) -> None: ...

    def tenant_email_updated(self, tenant_id: str) -> None: ...

    def with_context(self, context: ObservationContext) -> TenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRepositoryProbe:
    """Default implementation of TenantRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantRepositoryProbe:
        return DefaultTenantRepositoryProbe(logger=self._logger, context=context)

    def identity_exposed(self, external_user_id: str) -> None:
        self._logger.debug(
            "tenant_identity_exposed",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_retrieved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_not_visible(self, lookup: str) -> None:
        self._logger.debug(
            "tenant_not_visible",
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def tenant_inserted(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_inserted",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_email_updated(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_row_updated",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

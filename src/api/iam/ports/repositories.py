"""Repository protocols (ports) for IAM bounded context.

The tenants table is protected by a storage policy that only exposes the
current tenant's row, or the row whose external_user_id matches the
identity being resolved. Implementations therefore take care of setting
that identity before looking a tenant up by it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence."""

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by its ID.

        Args:
            tenant_id: The unique identifier of the tenant

        Returns:
            The Tenant aggregate, or None if not visible in this transaction
        """
        ...

    async def get_by_external_user_id(self, external_user_id: str) -> Tenant | None:
        """Retrieve the tenant linked to an identity provider subject.

        Must be called inside an open transaction.
        """
        ...

    async def add(self, tenant: Tenant) -> None:
        """Insert a new tenant."""
        ...

    async def save(self, tenant: Tenant) -> None:
        """Persist changes to an existing tenant."""
        ...

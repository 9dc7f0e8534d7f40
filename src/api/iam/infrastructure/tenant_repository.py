"""PostgreSQL implementation of ITenantRepository.

This repository manages tenant storage in PostgreSQL. Unlike the husbandry
repositories it is not scoped by a TenantContextAccessor: it is the piece
that resolves the tenant in the first place. The tenants table policy lets
a transaction see the current tenant's row, or the row whose
external_user_id matches ``app.current_external_user_id``.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId
from iam.infrastructure.models import TenantModel
from iam.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from iam.ports.repositories import ITenantRepository
from infrastructure.database.tenant_session import set_external_user_setting


class TenantRepository(ITenantRepository):
    """Repository managing PostgreSQL storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession for the current request
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.tenant_not_visible(tenant_id.value)
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_external_user_id(self, external_user_id: str) -> Tenant | None:
        """Retrieve the tenant linked to an identity provider subject.

        Sets ``app.current_external_user_id`` for the rest of the current
        transaction so the tenants policy lets the matching row through.
        """
        await set_external_user_setting(self._session, external_user_id)
        self._probe.identity_exposed(external_user_id)
        stmt = select(TenantModel).where(
            TenantModel.external_user_id == external_user_id
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.tenant_not_visible(external_user_id)
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def add(self, tenant: Tenant) -> None:
        # The policy's WITH CHECK only admits a row for the current identity.
        await set_external_user_setting(self._session, tenant.external_user_id)
        self._probe.identity_exposed(tenant.external_user_id)
        self._session.add(
            TenantModel(
                id=tenant.id.value,
                external_user_id=tenant.external_user_id,
                email=tenant.email,
                created_at=tenant.created_at,
                updated_at=tenant.updated_at,
            )
        )
        await self._session.flush()
        self._probe.tenant_inserted(tenant.id.value)

    async def save(self, tenant: Tenant) -> None:
        """Persist the tenant's email.

        Raises:
            ValueError: If the tenant is not visible in this transaction
        """
        stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            raise ValueError(f"Tenant {tenant.id.value} does not exist")

        model.email = tenant.email
        model.updated_at = tenant.updated_at
        await self._session.flush()
        self._probe.tenant_email_updated(tenant.id.value)

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        return Tenant(
            id=TenantId(value=model.id),
            external_user_id=model.external_user_id,
            email=model.email,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

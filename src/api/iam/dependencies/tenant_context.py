"""Tenant context resolution.

Builds the per-request TenantContextAccessor from the caller's external
identity. The identity is assumed to be already authenticated by the
caller of this module; only the lookup of the owning tenant happens here.

The lookup runs on a session of its own, bound to an anonymous accessor:
the tenants table is reached through the identity setting, and no tenant
is known yet. Work for the request then happens on a second session bound
to the resolved accessor, so row-level security scopes it to that tenant.

Usage:
    async with open_tenant_session(claims.get("sub")) as (session, accessor):
        service = CoopService(session, CoopRepository(session, accessor), accessor)
        result = await service.list_coops()
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from iam.infrastructure.tenant_repository import TenantRepository
from iam.ports.repositories import ITenantRepository
from infrastructure.database.dependencies import get_write_sessionmaker
from infrastructure.database.tenant_session import bind_tenant_to_session
from shared_kernel.tenancy import RequestTenantContextAccessor, TenantContext
from shared_kernel.tenancy.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)


@asynccontextmanager
async def open_tenant_session(
    external_user_id: str | None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    probe: TenantContextProbe | None = None,
) -> AsyncIterator[tuple[AsyncSession, RequestTenantContextAccessor]]:
    """Resolve the caller's tenant and open a session scoped to it.

    The lookup session is closed before the yielded session is opened.

    Args:
        external_user_id: Subject of the authenticated caller, or None
        session_factory: Sessionmaker to use; defaults to the shared
            write sessionmaker
        probe: Domain probe for observability

    Yields:
        The request session, bound to the resolved accessor, and the
        accessor itself
    """
    factory = session_factory or get_write_sessionmaker()

    async with factory() as lookup_session:
        bind_tenant_to_session(lookup_session, RequestTenantContextAccessor.anonymous())
        accessor = await resolve_tenant_context(
            external_user_id,
            lookup_session,
            TenantRepository(lookup_session),
            probe,
        )

    async with factory() as session:
        bind_tenant_to_session(session, accessor)
        yield session, accessor


async def resolve_tenant_context(
    external_user_id: str | None,
    session: AsyncSession,
    tenant_repository: ITenantRepository,
    probe: TenantContextProbe | None = None,
) -> RequestTenantContextAccessor:
    """Resolve the tenant owning an external identity.

    Args:
        external_user_id: Subject of the authenticated caller, or None when
            the request carries no identity
        session: Database session used for the lookup
        tenant_repository: Repository for looking up the tenant
        probe: Domain probe for observability

    Returns:
        An anonymous accessor for a missing or blank identity; an
        authenticated accessor without a tenant for an identity that has
        not been provisioned yet; otherwise an accessor scoped to the
        identity's tenant.
    """
    probe = probe or DefaultTenantContextProbe()

    if external_user_id is None or not external_user_id.strip():
        probe.anonymous_request()
        return RequestTenantContextAccessor.anonymous()

    external_user_id = external_user_id.strip()
    async with session.begin():
        tenant = await tenant_repository.get_by_external_user_id(external_user_id)

    if tenant is None:
        probe.tenant_not_provisioned(user_id=external_user_id)
        return RequestTenantContextAccessor(user_id=external_user_id)

    probe.tenant_resolved(tenant_id=tenant.id.value, user_id=external_user_id)
    return RequestTenantContextAccessor(
        user_id=external_user_id,
        context=TenantContext(
            tenant_id=tenant.id,
            user_id=external_user_id,
            source="identity",
        ),
    )

"""Storage-level tenant isolation for database sessions.

PostgreSQL row-level security policies (see the migrations) only let a
transaction see rows whose tenant_id equals the ``app.current_tenant_id``
setting. This module sets that value at the start of every transaction a
session opens, from the request's TenantContextAccessor.

This layer is independent of the repositories' own tenant filters: the
repositories never read or write the setting, and this module never
inspects queries.
"""

from __future__ import annotations

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, SessionTransaction

from infrastructure.observability import ConnectionProbe, DefaultConnectionProbe
from shared_kernel.tenancy import TenantContextAccessor

TENANT_SETTING = "app.current_tenant_id"
EXTERNAL_USER_SETTING = "app.current_external_user_id"

_BOUND_FLAG = "henhouse.tenant_bound"

# is_local=true scopes the value to the current transaction, so a pooled
# connection never carries one request's tenant into the next.
_SET_CONFIG = text("SELECT set_config(:name, :value, true)")


def bind_tenant_to_session(
    session: AsyncSession,
    accessor: TenantContextAccessor,
    probe: ConnectionProbe | None = None,
) -> None:
    """Scope every transaction of session to the accessor's tenant.

    The tenant is read from the accessor when each transaction begins. With
    no tenant, the setting is set to an empty string, which matches no row.
    Binding the same session twice has no effect.

    Args:
        session: Session to bind
        accessor: Tenant context accessor for the current request
        probe: Optional domain probe for observability
    """
    sync_session = session.sync_session
    if sync_session.info.get(_BOUND_FLAG):
        return
    sync_session.info[_BOUND_FLAG] = True
    probe = probe or DefaultConnectionProbe()

    @event.listens_for(sync_session, "after_begin")
    def _apply_tenant_setting(
        _session: Session,
        _transaction: SessionTransaction,
        connection: Connection,
    ) -> None:
        tenant_id = accessor.current_tenant_id()
        if tenant_id is None:
            probe.transaction_without_tenant()
            value = ""
        else:
            probe.tenant_bound_to_transaction(tenant_id.value)
            value = tenant_id.value
        connection.execute(_SET_CONFIG, {"name": TENANT_SETTING, "value": value})


async def set_external_user_setting(
    session: AsyncSession, external_user_id: str
) -> None:
    """Expose the caller's external identity to the tenants table policy.

    Must run inside an open transaction; the value lasts until it ends.
    """
    await session.execute(
        _SET_CONFIG, {"name": EXTERNAL_USER_SETTING, "value": external_user_id}
    )

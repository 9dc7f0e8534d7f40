"""Shared plumbing for tenant-scoped PostgreSQL repositories.

Every query built here starts from the current tenant: reads are filtered by
tenant_id and writes are refused for rows of another tenant. The tenant is
always taken from the request's TenantContextAccessor, never from callers.
"""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from husbandry.infrastructure.observability import (
    DefaultHusbandryRepositoryProbe,
    HusbandryRepositoryProbe,
)
from infrastructure.database.exceptions import TenantIsolationError
from infrastructure.settings import get_husbandry_settings
from shared_kernel.tenancy import TenantContextAccessor, TenantId, require_tenant_id


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TenantScopedRepository:
    """Base class for repositories whose rows belong to one tenant.

    Subclasses set _model to their ORM model (which must have tenant_id and
    id columns) and _aggregate to a short name used in probe events.
    """

    _model: ClassVar[Any]
    _aggregate: ClassVar[str]

    def __init__(
        self,
        session: AsyncSession,
        accessor: TenantContextAccessor,
        probe: HusbandryRepositoryProbe | None = None,
        max_search_limit: int | None = None,
    ) -> None:
        """Initialize repository with database session and tenant accessor.

        Args:
            session: AsyncSession for the current request
            accessor: Tenant context accessor for the current request
            probe: Optional domain probe for observability
            max_search_limit: Upper bound for autocomplete results; defaults
                to HENHOUSE_HUSBANDRY_MAX_SEARCH_LIMIT
        """
        self._session = session
        self._accessor = accessor
        self._probe = probe or DefaultHusbandryRepositoryProbe()
        self._max_search_limit = (
            max_search_limit or get_husbandry_settings().max_search_limit
        )

    def _tenant(self, operation: str) -> str:
        """Current tenant id; raises MissingTenantContextError if absent."""
        return require_tenant_id(
            self._accessor, f"{self._aggregate}.{operation}"
        ).value

    def _scoped_select(
        self, operation: str, *entities: Any, model: Any | None = None
    ) -> Select:
        """SELECT of entities (default: the model) limited to the current tenant.

        The tenant filter applies to model, which defaults to _model.
        """
        tenant = self._tenant(operation)
        model = model if model is not None else self._model
        return select(*(entities or (model,))).where(model.tenant_id == tenant)

    def _assert_owned(self, tenant_id: TenantId, operation: str) -> str:
        """Refuse to write a row of another tenant.

        Returns:
            The current tenant id

        Raises:
            TenantIsolationError: If tenant_id is not the current tenant
        """
        current = self._tenant(operation)
        if tenant_id.value != current:
            raise TenantIsolationError(
                table=self._model.__tablename__,
                row_tenant_id=tenant_id.value,
                current_tenant_id=current,
            )
        return current

    async def _get_model(
        self, row_id: str, operation: str, for_update: bool = False
    ) -> Any | None:
        """Load one row of the current tenant, optionally row-locked.

        With for_update the row stays locked until the transaction ends, so
        concurrent writers of the same aggregate are serialized.
        """
        stmt = self._scoped_select(operation).where(self._model.id == row_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            self._probe.aggregate_not_found(self._aggregate, row_id)
        return model

    async def _delete_row(self, row_id: str, tenant_id: TenantId) -> bool:
        self._assert_owned(tenant_id, "delete")
        model = await self._get_model(row_id, "delete")
        if model is None:
            return False

        await self._session.delete(model)
        await self._session.flush()

        self._probe.aggregate_deleted(self._aggregate, row_id)
        return True

    async def _search_distinct(
        self,
        column: InstrumentedAttribute,
        query: str,
        limit: int,
    ) -> list[str]:
        """Case-insensitive partial match on column within the current tenant.

        Blank queries and non-positive limits return [] without querying.
        """
        if not query or not query.strip() or limit < 1:
            return []
        limit = min(limit, self._max_search_limit)

        pattern = f"%{escape_like(query.strip())}%"
        stmt = (
            self._scoped_select("search", column)
            .where(column.ilike(pattern, escape="\\"))
            .distinct()
            .order_by(column)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        values = list(result.scalars().all())

        self._probe.names_searched(self._aggregate, query, len(values))
        return values

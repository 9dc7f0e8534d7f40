"""PostgreSQL implementation of ICoopRepository."""

from __future__ import annotations

from sqlalchemy import select

from husbandry.domain.aggregates import Coop
from husbandry.domain.value_objects import CoopId
from husbandry.infrastructure.models import CoopModel, FlockModel
from husbandry.infrastructure.tenant_scoped import TenantScopedRepository
from husbandry.ports.repositories import DEFAULT_SEARCH_LIMIT, ICoopRepository
from shared_kernel.tenancy import TenantId


class CoopRepository(TenantScopedRepository, ICoopRepository):
    """Repository managing PostgreSQL storage for Coop aggregates."""

    _model = CoopModel
    _aggregate = "coop"

    async def get_by_id(self, coop_id: CoopId) -> Coop | None:
        """Fetch a coop of the current tenant.

        Args:
            coop_id: The unique identifier of the coop

        Returns:
            The Coop aggregate, or None if absent or owned by another tenant
        """
        model = await self._get_model(coop_id.value, "get_by_id")
        if model is None:
            return None

        self._probe.aggregate_retrieved(self._aggregate, model.id)
        return self._to_domain(model)

    async def list_all(self, include_archived: bool = False) -> list[Coop]:
        stmt = self._scoped_select("list_all")
        if not include_archived:
            stmt = stmt.where(CoopModel.is_active.is_(True))
        stmt = stmt.order_by(CoopModel.created_at.desc(), CoopModel.id.desc())

        result = await self._session.execute(stmt)
        coops = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.aggregates_listed(self._aggregate, len(coops))
        return coops

    async def add(self, coop: Coop) -> None:
        tenant = self._assert_owned(coop.tenant_id, "add")
        self._session.add(
            CoopModel(
                id=coop.id.value,
                tenant_id=tenant,
                name=coop.name,
                location=coop.location,
                is_active=coop.is_active,
                created_at=coop.created_at,
                updated_at=coop.updated_at,
            )
        )
        await self._session.flush()
        self._probe.aggregate_saved(self._aggregate, coop.id.value, tenant)

    async def save(self, coop: Coop) -> None:
        """Persist changes to an existing coop.

        Raises:
            ValueError: If the coop does not exist in the current tenant
        """
        tenant = self._assert_owned(coop.tenant_id, "save")
        model = await self._get_model(coop.id.value, "save")
        if model is None:
            raise ValueError(f"Coop {coop.id.value} does not exist")

        model.name = coop.name
        model.location = coop.location
        model.is_active = coop.is_active
        model.updated_at = coop.updated_at
        await self._session.flush()
        self._probe.aggregate_saved(self._aggregate, coop.id.value, tenant)

    async def delete(self, coop: Coop) -> bool:
        return await self._delete_row(coop.id.value, coop.tenant_id)

    async def exists_by_name(self, name: str) -> bool:
        stmt = select(
            self._scoped_select("exists_by_name", CoopModel.id)
            .where(CoopModel.name == name)
            .exists()
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def has_flocks(self, coop_id: CoopId) -> bool:
        tenant = self._tenant("has_flocks")
        stmt = select(
            select(FlockModel.id)
            .where(
                FlockModel.tenant_id == tenant,
                FlockModel.coop_id == coop_id.value,
            )
            .exists()
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def search_names(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[str]:
        return await self._search_distinct(CoopModel.name, query, limit)

    @staticmethod
    def _to_domain(model: CoopModel) -> Coop:
        return Coop(
            id=CoopId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            name=model.name,
            location=model.location,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

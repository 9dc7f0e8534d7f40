"""PostgreSQL implementation of IFlockRepository.

Flocks and their history ledger are written together: add() and save()
insert every history entry the aggregate appended since it was loaded, in
the caller's transaction, so counts and history can only commit together.

save() locks the flock row before numbering new entries, and numbers them
after the highest position already stored. A writer that loaded the flock
without the lock therefore waits for any concurrent writer and appends
after its entries instead of colliding with them.
"""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import func, select

from husbandry.domain.aggregates import Flock, FlockHistory
from husbandry.domain.value_objects import CoopId, FlockHistoryId, FlockId
from husbandry.infrastructure.models import FlockHistoryModel, FlockModel
from husbandry.infrastructure.tenant_scoped import TenantScopedRepository
from husbandry.ports.repositories import DEFAULT_SEARCH_LIMIT, IFlockRepository
from shared_kernel.tenancy import TenantId


class FlockRepository(TenantScopedRepository, IFlockRepository):
    """Repository managing PostgreSQL storage for Flock aggregates."""

    _model = FlockModel
    _aggregate = "flock"

    async def get_by_id(
        self, flock_id: FlockId, for_update: bool = False
    ) -> Flock | None:
        """Fetch a flock of the current tenant with its full history.

        Args:
            flock_id: The unique identifier of the flock
            for_update: Lock the flock row until the transaction ends

        Returns:
            The Flock aggregate with history in insertion order, or None if
            absent or owned by another tenant
        """
        model = await self._get_model(flock_id.value, "get_by_id", for_update)
        if model is None:
            return None

        histories = await self._load_history(model.tenant_id, [model.id])

        self._probe.aggregate_retrieved(self._aggregate, model.id)
        return self._to_domain(model, histories[model.id])

    async def list_all(
        self,
        coop_id: CoopId | None = None,
        include_archived: bool = False,
    ) -> list[Flock]:
        """List flocks newest first, each with its full history.

        History for all listed flocks is read with one extra query.
        """
        tenant = self._tenant("list_all")
        stmt = self._scoped_select("list_all")
        if coop_id is not None:
            stmt = stmt.where(FlockModel.coop_id == coop_id.value)
        if not include_archived:
            stmt = stmt.where(FlockModel.is_active.is_(True))
        stmt = stmt.order_by(FlockModel.created_at.desc(), FlockModel.id.desc())

        result = await self._session.execute(stmt)
        models = result.scalars().all()
        if not models:
            self._probe.aggregates_listed(self._aggregate, 0)
            return []

        histories = await self._load_history(tenant, [model.id for model in models])
        flocks = [self._to_domain(model, histories[model.id]) for model in models]

        self._probe.aggregates_listed(self._aggregate, len(flocks))
        return flocks

    async def add(self, flock: Flock) -> None:
        tenant = self._assert_owned(flock.tenant_id, "add")
        self._session.add(
            FlockModel(
                id=flock.id.value,
                tenant_id=tenant,
                coop_id=flock.coop_id.value,
                identifier=flock.identifier,
                hatch_date=flock.hatch_date,
                hens=flock.hens,
                roosters=flock.roosters,
                chicks=flock.chicks,
                is_active=flock.is_active,
                created_at=flock.created_at,
                updated_at=flock.updated_at,
            )
        )
        # Flush the flock first so history rows satisfy their foreign key
        await self._session.flush()
        await self._append_pending_history(flock, tenant, first_position=0)
        self._probe.aggregate_saved(self._aggregate, flock.id.value, tenant)

    async def save(self, flock: Flock) -> None:
        """Persist flock changes and any new history entries.

        Raises:
            ValueError: If the flock does not exist in the current tenant
        """
        tenant = self._assert_owned(flock.tenant_id, "save")
        model = await self._get_model(flock.id.value, "save", for_update=True)
        if model is None:
            raise ValueError(f"Flock {flock.id.value} does not exist")

        model.identifier = flock.identifier
        model.hatch_date = flock.hatch_date
        model.hens = flock.hens
        model.roosters = flock.roosters
        model.chicks = flock.chicks
        model.is_active = flock.is_active
        model.updated_at = flock.updated_at
        await self._session.flush()
        await self._append_pending_history(flock, tenant)
        self._probe.aggregate_saved(self._aggregate, flock.id.value, tenant)

    async def exists_in_coop(self, identifier: str, coop_id: CoopId) -> bool:
        tenant = self._tenant("exists_in_coop")
        stmt = select(
            select(FlockModel.id)
            .where(
                FlockModel.tenant_id == tenant,
                FlockModel.coop_id == coop_id.value,
                FlockModel.identifier == identifier,
            )
            .exists()
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def search_identifiers(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[str]:
        return await self._search_distinct(FlockModel.identifier, query, limit)

    async def _append_pending_history(
        self, flock: Flock, tenant: str, first_position: int | None = None
    ) -> None:
        pending = flock.collect_new_history()
        if not pending:
            return

        if first_position is None:
            first_position = await self._next_position(flock.id.value, tenant)
        for offset, entry in enumerate(pending):
            self._session.add(
                FlockHistoryModel(
                    id=entry.id.value,
                    tenant_id=tenant,
                    flock_id=flock.id.value,
                    position=first_position + offset,
                    change_date=entry.change_date,
                    hens=entry.hens,
                    roosters=entry.roosters,
                    chicks=entry.chicks,
                    reason=entry.reason,
                    notes=entry.notes,
                    created_at=entry.created_at,
                    updated_at=entry.updated_at,
                )
            )
        await self._session.flush()
        self._probe.history_appended(flock.id.value, len(pending))

    async def _next_position(self, flock_id: str, tenant: str) -> int:
        """Position after the last stored entry; the caller holds the row lock."""
        stmt = select(
            func.coalesce(func.max(FlockHistoryModel.position) + 1, 0)
        ).where(
            FlockHistoryModel.tenant_id == tenant,
            FlockHistoryModel.flock_id == flock_id,
        )
        result = await self._session.execute(stmt)
        return int(result.scalar())

    async def _load_history(
        self, tenant: str, flock_ids: list[str]
    ) -> dict[str, list[FlockHistory]]:
        """History of the given flocks keyed by flock id, in position order."""
        stmt = (
            select(FlockHistoryModel)
            .where(
                FlockHistoryModel.tenant_id == tenant,
                FlockHistoryModel.flock_id.in_(flock_ids),
            )
            .order_by(FlockHistoryModel.flock_id, FlockHistoryModel.position)
        )
        result = await self._session.execute(stmt)

        histories: dict[str, list[FlockHistory]] = defaultdict(list)
        for row in result.scalars().all():
            histories[row.flock_id].append(history_to_domain(row))
        return histories

    @staticmethod
    def _to_domain(model: FlockModel, history: list[FlockHistory]) -> Flock:
        return Flock(
            id=FlockId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            coop_id=CoopId(value=model.coop_id),
            identifier=model.identifier,
            hatch_date=model.hatch_date,
            hens=model.hens,
            roosters=model.roosters,
            chicks=model.chicks,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
            history=history,
        )


def history_to_domain(model: FlockHistoryModel) -> FlockHistory:
    """Reconstitute a FlockHistory entry from its row."""
    return FlockHistory(
        id=FlockHistoryId(value=model.id),
        tenant_id=TenantId(value=model.tenant_id),
        flock_id=FlockId(value=model.flock_id),
        change_date=model.change_date,
        hens=model.hens,
        roosters=model.roosters,
        chicks=model.chicks,
        reason=model.reason,
        notes=model.notes,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )

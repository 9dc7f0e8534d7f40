"""PostgreSQL implementation of IFlockHistoryRepository.

This repository never inserts or deletes history rows; entries are
inserted only through FlockRepository together with their flock.
"""

from __future__ import annotations

from husbandry.domain.aggregates import FlockHistory
from husbandry.domain.value_objects import FlockHistoryId, FlockId
from husbandry.infrastructure.flock_repository import history_to_domain
from husbandry.infrastructure.models import FlockHistoryModel
from husbandry.infrastructure.tenant_scoped import TenantScopedRepository
from husbandry.ports.repositories import IFlockHistoryRepository


class FlockHistoryRepository(TenantScopedRepository, IFlockHistoryRepository):
    """Repository for reading history entries and replacing their notes."""

    _model = FlockHistoryModel
    _aggregate = "flock_history"

    async def get_by_id(self, entry_id: FlockHistoryId) -> FlockHistory | None:
        model = await self._get_model(entry_id.value, "get_by_id")
        if model is None:
            return None

        self._probe.aggregate_retrieved(self._aggregate, model.id)
        return history_to_domain(model)

    async def list_by_flock(self, flock_id: FlockId) -> list[FlockHistory]:
        stmt = (
            self._scoped_select("list_by_flock")
            .where(FlockHistoryModel.flock_id == flock_id.value)
            .order_by(FlockHistoryModel.position)
        )
        result = await self._session.execute(stmt)
        entries = [history_to_domain(model) for model in result.scalars().all()]

        self._probe.aggregates_listed(self._aggregate, len(entries))
        return entries

    async def save_notes(self, entry: FlockHistory) -> None:
        """Write the entry's notes and updated_at, and nothing else.

        Raises:
            ValueError: If the entry does not exist in the current tenant
        """
        self._assert_owned(entry.tenant_id, "save_notes")
        model = await self._get_model(entry.id.value, "save_notes")
        if model is None:
            raise ValueError(f"Flock history entry {entry.id.value} does not exist")

        model.notes = entry.notes
        model.updated_at = entry.updated_at
        await self._session.flush()
        self._probe.history_notes_saved(entry.id.value, model.flock_id)

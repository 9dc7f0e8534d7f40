"""Flock application service for the husbandry bounded context."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from husbandry.application.observability import HusbandryServiceProbe
from husbandry.application.services.base import TenantScopedService
from husbandry.domain.aggregates import Flock, FlockHistory
from husbandry.domain.value_objects import CoopId, FlockHistoryId, FlockId
from husbandry.ports.repositories import (
    ICoopRepository,
    IFlockHistoryRepository,
    IFlockRepository,
)
from shared_kernel.result import Error, Result
from shared_kernel.tenancy import TenantContextAccessor
from shared_kernel.validation import DomainValidationError


class FlockService(TenantScopedService):
    """Application service for flocks and their composition history.

    Composition changes always go through the Flock aggregate, so every
    change appends exactly one history entry that is persisted in the same
    transaction as the new counts.
    """

    def __init__(
        self,
        session: AsyncSession,
        flock_repository: IFlockRepository,
        coop_repository: ICoopRepository,
        history_repository: IFlockHistoryRepository,
        accessor: TenantContextAccessor,
        probe: HusbandryServiceProbe | None = None,
    ):
        """Initialize FlockService with dependencies.

        Args:
            session: Database session for transaction management
            flock_repository: Tenant-scoped repository for flocks
            coop_repository: Tenant-scoped repository for coops
            history_repository: Tenant-scoped repository for history entries
            accessor: Tenant context accessor for the current request
            probe: Optional domain probe for observability
        """
        super().__init__(session, accessor, probe)
        self._flock_repository = flock_repository
        self._coop_repository = coop_repository
        self._history_repository = history_repository

    async def create_flock(
        self,
        coop_id: CoopId,
        identifier: str,
        hatch_date: datetime,
        hens: int,
        roosters: int,
        chicks: int,
        notes: str | None = None,
    ) -> Result[Flock]:
        """Create a flock in one of the tenant's coops.

        The flock starts with a single "Initial" history entry.

        Returns:
            NotFound if the coop is not visible to the tenant, Conflict
            "flock.duplicate_identifier" if the coop already has a flock
            with this identifier
        """
        tenant = self._current_tenant("create_flock")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                coop = await self._coop_repository.get_by_id(coop_id)
                if coop is None or coop.tenant_id != tenant:
                    return self._not_found("create_flock", "coop", coop_id.value)

                if await self._flock_repository.exists_in_coop(identifier, coop_id):
                    return self._duplicate_identifier("create_flock")

                flock = Flock.create(
                    tenant_id=tenant,
                    coop_id=coop_id,
                    identifier=identifier,
                    hatch_date=hatch_date,
                    hens=hens,
                    roosters=roosters,
                    chicks=chicks,
                    notes=notes,
                )
                await self._flock_repository.add(flock)
        except DomainValidationError as e:
            return self._invalid("create_flock", e)
        except Exception as e:
            return self._unexpected("create_flock", e)

        self._probe.aggregate_created("flock", flock.id.value, tenant.value)
        return Result.success(flock)

    async def update_flock(
        self, flock_id: FlockId, identifier: str, hatch_date: datetime
    ) -> Result[Flock]:
        """Change a flock's identifier and hatch date without touching history."""
        tenant = self._current_tenant("update_flock")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                flock = await self._flock_repository.get_by_id(
                    flock_id, for_update=True
                )
                if flock is None:
                    return self._not_found("update_flock", "flock", flock_id.value)

                if (
                    identifier != flock.identifier
                    and await self._flock_repository.exists_in_coop(
                        identifier, flock.coop_id
                    )
                ):
                    return self._duplicate_identifier("update_flock")

                flock.update(identifier=identifier, hatch_date=hatch_date)
                await self._flock_repository.save(flock)
        except DomainValidationError as e:
            return self._invalid("update_flock", e)
        except Exception as e:
            return self._unexpected("update_flock", e)

        self._probe.aggregate_updated("update_flock", "flock", flock.id.value)
        return Result.success(flock)

    async def update_composition(
        self,
        flock_id: FlockId,
        hens: int,
        roosters: int,
        chicks: int,
        reason: str,
        notes: str | None = None,
    ) -> Result[Flock]:
        """Set new counts and append a history entry with the given reason.

        Archived flocks are rejected with a Validation error on flock_id.
        """
        tenant = self._current_tenant("update_composition")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                flock = await self._flock_repository.get_by_id(
                    flock_id, for_update=True
                )
                if flock is None:
                    return self._not_found(
                        "update_composition", "flock", flock_id.value
                    )

                entry = flock.update_composition(
                    hens=hens,
                    roosters=roosters,
                    chicks=chicks,
                    reason=reason,
                    notes=notes,
                )
                await self._flock_repository.save(flock)
        except DomainValidationError as e:
            return self._invalid("update_composition", e)
        except Exception as e:
            return self._unexpected("update_composition", e)

        self._composition_changed(flock, entry)
        return Result.success(flock)

    async def mature_chicks(
        self,
        flock_id: FlockId,
        chicks_to_mature: int,
        hens: int,
        roosters: int,
        notes: str | None = None,
    ) -> Result[Flock]:
        """Convert chicks into hens and roosters with reason "Maturation".

        Archived flocks are rejected with a Validation error.
        """
        tenant = self._current_tenant("mature_chicks")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                flock = await self._flock_repository.get_by_id(
                    flock_id, for_update=True
                )
                if flock is None:
                    return self._not_found("mature_chicks", "flock", flock_id.value)

                entry = flock.mature_chicks(
                    chicks_to_mature=chicks_to_mature,
                    hens=hens,
                    roosters=roosters,
                    notes=notes,
                )
                await self._flock_repository.save(flock)
        except DomainValidationError as e:
            return self._invalid("mature_chicks", e)
        except Exception as e:
            return self._unexpected("mature_chicks", e)

        self._composition_changed(flock, entry)
        return Result.success(flock)

    async def archive_flock(self, flock_id: FlockId) -> Result[Flock]:
        """Deactivate a flock. Its history and daily records are kept."""
        return await self._set_active("archive_flock", flock_id, active=False)

    async def activate_flock(self, flock_id: FlockId) -> Result[Flock]:
        return await self._set_active("activate_flock", flock_id, active=True)

    async def get_flock(self, flock_id: FlockId) -> Result[Flock]:
        """Fetch a flock with its full history."""
        tenant = self._current_tenant("get_flock")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            flock = await self._flock_repository.get_by_id(flock_id)
        except Exception as e:
            return self._unexpected("get_flock", e)

        if flock is None:
            return self._not_found("get_flock", "flock", flock_id.value)
        return Result.success(flock)

    async def list_flocks(
        self, coop_id: CoopId | None = None, include_archived: bool = False
    ) -> Result[list[Flock]]:
        tenant = self._current_tenant("list_flocks")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            flocks = await self._flock_repository.list_all(
                coop_id=coop_id, include_archived=include_archived
            )
        except Exception as e:
            return self._unexpected("list_flocks", e)

        return Result.success(flocks)

    async def get_history(self, flock_id: FlockId) -> Result[list[FlockHistory]]:
        """Return a flock's history, oldest entry first.

        NotFound if the flock itself is not visible to the tenant.
        """
        tenant = self._current_tenant("get_history")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            flock = await self._flock_repository.get_by_id(flock_id)
            if flock is None:
                return self._not_found("get_history", "flock", flock_id.value)
            entries = await self._history_repository.list_by_flock(flock_id)
        except Exception as e:
            return self._unexpected("get_history", e)

        return Result.success(entries)

    async def update_history_notes(
        self, entry_id: FlockHistoryId, notes: str | None
    ) -> Result[FlockHistory]:
        """Replace the notes of a history entry. Counts and reason never change."""
        tenant = self._current_tenant("update_history_notes")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                entry = await self._history_repository.get_by_id(entry_id)
                if entry is None:
                    return self._not_found(
                        "update_history_notes", "flock_history", entry_id.value
                    )

                entry = entry.update_notes(notes)
                await self._history_repository.save_notes(entry)
        except DomainValidationError as e:
            return self._invalid("update_history_notes", e)
        except Exception as e:
            return self._unexpected("update_history_notes", e)

        self._probe.aggregate_updated(
            "update_history_notes", "flock_history", entry.id.value
        )
        return Result.success(entry)

    async def search_flock_identifiers(
        self, query: str, limit: int | None = None
    ) -> Result[list[str]]:
        tenant = self._current_tenant("search_flock_identifiers")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            identifiers = await self._flock_repository.search_identifiers(
                query, limit or self._default_search_limit
            )
        except Exception as e:
            return self._unexpected("search_flock_identifiers", e)

        return Result.success(identifiers)

    def _duplicate_identifier(self, operation: str) -> Result[Flock]:
        return self._conflict(
            operation,
            code="flock.duplicate_identifier",
            message="A flock with this identifier already exists in the coop",
        )

    def _composition_changed(self, flock: Flock, entry: FlockHistory) -> None:
        self._probe.composition_changed(
            flock_id=flock.id.value,
            reason=entry.reason,
            hens=flock.hens,
            roosters=flock.roosters,
            chicks=flock.chicks,
            history_length=len(flock.history),
        )

    async def _set_active(
        self, operation: str, flock_id: FlockId, active: bool
    ) -> Result[Flock]:
        tenant = self._current_tenant(operation)
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                flock = await self._flock_repository.get_by_id(
                    flock_id, for_update=True
                )
                if flock is None:
                    return self._not_found(operation, "flock", flock_id.value)

                if active:
                    flock.activate()
                else:
                    flock.archive()
                await self._flock_repository.save(flock)
        except Exception as e:
            return self._unexpected(operation, e)

        self._probe.aggregate_updated(operation, "flock", flock.id.value)
        return Result.success(flock)

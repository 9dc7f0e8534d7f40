"""Coop application service for the husbandry bounded context."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from husbandry.application.observability import HusbandryServiceProbe
from husbandry.application.services.base import TenantScopedService
from husbandry.domain.aggregates import Coop
from husbandry.domain.value_objects import CoopId
from husbandry.ports.repositories import ICoopRepository
from shared_kernel.result import Error, Result
from shared_kernel.tenancy import TenantContextAccessor
from shared_kernel.validation import DomainValidationError


class CoopService(TenantScopedService):
    """Application service for coop management.

    All operations act on the current tenant's coops only.
    """

    def __init__(
        self,
        session: AsyncSession,
        coop_repository: ICoopRepository,
        accessor: TenantContextAccessor,
        probe: HusbandryServiceProbe | None = None,
    ):
        """Initialize CoopService with dependencies.

        Args:
            session: Database session for transaction management
            coop_repository: Tenant-scoped repository for coops
            accessor: Tenant context accessor for the current request
            probe: Optional domain probe for observability
        """
        super().__init__(session, accessor, probe)
        self._coop_repository = coop_repository

    async def create_coop(
        self, name: str, location: str | None = None
    ) -> Result[Coop]:
        """Create an active coop for the current tenant."""
        tenant = self._current_tenant("create_coop")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                if await self._coop_repository.exists_by_name(name):
                    return self._duplicate_name("create_coop")

                coop = Coop.create(tenant_id=tenant, name=name, location=location)
                await self._coop_repository.add(coop)
        except DomainValidationError as e:
            return self._invalid("create_coop", e)
        except Exception as e:
            return self._unexpected("create_coop", e)

        self._probe.aggregate_created("coop", coop.id.value, tenant.value)
        return Result.success(coop)

    async def update_coop(
        self, coop_id: CoopId, name: str, location: str | None = None
    ) -> Result[Coop]:
        """Rename or relocate a coop."""
        tenant = self._current_tenant("update_coop")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                coop = await self._coop_repository.get_by_id(coop_id)
                if coop is None:
                    return self._not_found("update_coop", "coop", coop_id.value)

                if name != coop.name and await self._coop_repository.exists_by_name(
                    name
                ):
                    return self._duplicate_name("update_coop")

                coop.update(name=name, location=location)
                await self._coop_repository.save(coop)
        except DomainValidationError as e:
            return self._invalid("update_coop", e)
        except Exception as e:
            return self._unexpected("update_coop", e)

        self._probe.aggregate_updated("update_coop", "coop", coop.id.value)
        return Result.success(coop)

    async def archive_coop(self, coop_id: CoopId) -> Result[Coop]:
        """Deactivate a coop. Its flocks and purchases are untouched."""
        return await self._set_active("archive_coop", coop_id, active=False)

    async def activate_coop(self, coop_id: CoopId) -> Result[Coop]:
        """Reactivate an archived coop."""
        return await self._set_active("activate_coop", coop_id, active=True)

    async def delete_coop(self, coop_id: CoopId) -> Result[None]:
        """Delete a coop that has no flocks.

        Returns a Conflict failure with code "coop.has_flocks" if any flock,
        active or archived, still references the coop.
        """
        tenant = self._current_tenant("delete_coop")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                coop = await self._coop_repository.get_by_id(coop_id)
                if coop is None:
                    return self._not_found("delete_coop", "coop", coop_id.value)

                if await self._coop_repository.has_flocks(coop_id):
                    return self._conflict(
                        "delete_coop",
                        code="coop.has_flocks",
                        message="Cannot delete a coop that still has flocks",
                    )

                await self._coop_repository.delete(coop)
        except Exception as e:
            return self._unexpected("delete_coop", e)

        self._probe.aggregate_deleted("coop", coop_id.value)
        return Result.success(None)

    async def get_coop(self, coop_id: CoopId) -> Result[Coop]:
        tenant = self._current_tenant("get_coop")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            coop = await self._coop_repository.get_by_id(coop_id)
        except Exception as e:
            return self._unexpected("get_coop", e)

        if coop is None:
            return self._not_found("get_coop", "coop", coop_id.value)
        return Result.success(coop)

    async def list_coops(
        self, include_archived: bool = False
    ) -> Result[list[Coop]]:
        tenant = self._current_tenant("list_coops")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            coops = await self._coop_repository.list_all(
                include_archived=include_archived
            )
        except Exception as e:
            return self._unexpected("list_coops", e)

        return Result.success(coops)

    async def search_coop_names(
        self, query: str, limit: int | None = None
    ) -> Result[list[str]]:
        """Autocomplete coop names for the current tenant."""
        tenant = self._current_tenant("search_coop_names")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            names = await self._coop_repository.search_names(
                query, limit or self._default_search_limit
            )
        except Exception as e:
            return self._unexpected("search_coop_names", e)

        return Result.success(names)

    def _duplicate_name(self, operation: str) -> Result[Coop]:
        return self._conflict(
            operation,
            code="coop.duplicate_name",
            message="A coop with this name already exists",
        )

    async def _set_active(
        self, operation: str, coop_id: CoopId, active: bool
    ) -> Result[Coop]:
        tenant = self._current_tenant(operation)
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                coop = await self._coop_repository.get_by_id(coop_id)
                if coop is None:
                    return self._not_found(operation, "coop", coop_id.value)

                if active:
                    coop.activate()
                else:
                    coop.deactivate()
                await self._coop_repository.save(coop)
        except Exception as e:
            return self._unexpected(operation, e)

        self._probe.aggregate_updated(operation, "coop", coop.id.value)
        return Result.success(coop)

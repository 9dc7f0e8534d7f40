"""Daily egg production use cases."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from husbandry.application.observability import HusbandryServiceProbe
from husbandry.application.services.base import TenantScopedService
from husbandry.domain.aggregates import DailyRecord
from husbandry.domain.value_objects import DailyRecordId, FlockId
from husbandry.ports.repositories import IDailyRecordRepository, IFlockRepository
from shared_kernel.result import Error, Result
from shared_kernel.tenancy import TenantContextAccessor
from shared_kernel.validation import DomainValidationError


class DailyRecordService(TenantScopedService):
    """Application service for daily records.

    A flock has at most one record per UTC calendar day.
    """

    def __init__(
        self,
        session: AsyncSession,
        record_repository: IDailyRecordRepository,
        flock_repository: IFlockRepository,
        accessor: TenantContextAccessor,
        probe: HusbandryServiceProbe | None = None,
    ):
        super().__init__(session, accessor, probe)
        self._record_repository = record_repository
        self._flock_repository = flock_repository

    async def create_daily_record(
        self,
        flock_id: FlockId,
        record_date: datetime | date,
        egg_count: int,
        notes: str | None = None,
    ) -> Result[DailyRecord]:
        """Record the eggs collected from a flock on one day.

        Returns:
            NotFound if the flock is not visible to the tenant, Conflict
            "daily_record.duplicate_date" if the flock already has a record
            for that day
        """
        tenant = self._current_tenant("create_daily_record")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                flock = await self._flock_repository.get_by_id(flock_id)
                if flock is None:
                    return self._not_found(
                        "create_daily_record", "flock", flock_id.value
                    )

                record = DailyRecord.create(
                    tenant_id=tenant,
                    flock_id=flock_id,
                    record_date=record_date,
                    egg_count=egg_count,
                    notes=notes,
                )
                if await self._record_repository.exists_for_flock_and_date(
                    flock_id, record.record_date
                ):
                    return self._conflict(
                        "create_daily_record",
                        code="daily_record.duplicate_date",
                        message="A daily record for this flock and date already exists",
                    )

                await self._record_repository.add(record)
        except DomainValidationError as e:
            return self._invalid("create_daily_record", e)
        except Exception as e:
            return self._unexpected("create_daily_record", e)

        self._probe.aggregate_created("daily_record", record.id.value, tenant.value)
        return Result.success(record)

    async def update_daily_record(
        self, record_id: DailyRecordId, egg_count: int, notes: str | None = None
    ) -> Result[DailyRecord]:
        """Correct the egg count and notes. The record date never changes."""
        tenant = self._current_tenant("update_daily_record")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                record = await self._record_repository.get_by_id(record_id)
                if record is None:
                    return self._not_found(
                        "update_daily_record", "daily_record", record_id.value
                    )

                record.update(egg_count=egg_count, notes=notes)
                await self._record_repository.save(record)
        except DomainValidationError as e:
            return self._invalid("update_daily_record", e)
        except Exception as e:
            return self._unexpected("update_daily_record", e)

        self._probe.aggregate_updated(
            "update_daily_record", "daily_record", record.id.value
        )
        return Result.success(record)

    async def delete_daily_record(self, record_id: DailyRecordId) -> Result[None]:
        tenant = self._current_tenant("delete_daily_record")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                record = await self._record_repository.get_by_id(record_id)
                if record is None:
                    return self._not_found(
                        "delete_daily_record", "daily_record", record_id.value
                    )

                await self._record_repository.delete(record)
        except Exception as e:
            return self._unexpected("delete_daily_record", e)

        self._probe.aggregate_deleted("daily_record", record_id.value)
        return Result.success(None)

    async def get_daily_record(self, record_id: DailyRecordId) -> Result[DailyRecord]:
        tenant = self._current_tenant("get_daily_record")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            record = await self._record_repository.get_by_id(record_id)
        except Exception as e:
            return self._unexpected("get_daily_record", e)

        if record is None:
            return self._not_found("get_daily_record", "daily_record", record_id.value)
        return Result.success(record)

    async def list_daily_records(
        self,
        flock_id: FlockId | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Result[list[DailyRecord]]:
        """List records, newest day first, with inclusive date bounds."""
        tenant = self._current_tenant("list_daily_records")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            records = await self._record_repository.list_all(
                flock_id=flock_id, start_date=start_date, end_date=end_date
            )
        except Exception as e:
            return self._unexpected("list_daily_records", e)

        return Result.success(records)

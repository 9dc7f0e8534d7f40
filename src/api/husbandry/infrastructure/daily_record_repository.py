"""PostgreSQL implementation of IDailyRecordRepository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from husbandry.domain.aggregates import DailyRecord
from husbandry.domain.value_objects import DailyRecordId, FlockId
from husbandry.infrastructure.models import DailyRecordModel
from husbandry.infrastructure.tenant_scoped import TenantScopedRepository
from husbandry.ports.repositories import IDailyRecordRepository
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import to_utc_day


class DailyRecordRepository(TenantScopedRepository, IDailyRecordRepository):
    """Repository managing PostgreSQL storage for DailyRecord aggregates."""

    _model = DailyRecordModel
    _aggregate = "daily_record"

    async def get_by_id(self, record_id: DailyRecordId) -> DailyRecord | None:
        model = await self._get_model(record_id.value, "get_by_id")
        if model is None:
            return None

        self._probe.aggregate_retrieved(self._aggregate, model.id)
        return self._to_domain(model)

    async def list_all(
        self,
        flock_id: FlockId | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[DailyRecord]:
        """List daily records of the current tenant, newest day first.

        Date bounds are inclusive and compared by UTC calendar day.
        """
        stmt = self._scoped_select("list_all")
        if flock_id is not None:
            stmt = stmt.where(DailyRecordModel.flock_id == flock_id.value)
        if start_date is not None:
            stmt = stmt.where(DailyRecordModel.record_date >= to_utc_day(start_date))
        if end_date is not None:
            stmt = stmt.where(DailyRecordModel.record_date <= to_utc_day(end_date))
        stmt = stmt.order_by(
            DailyRecordModel.record_date.desc(), DailyRecordModel.id.desc()
        )

        result = await self._session.execute(stmt)
        records = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.aggregates_listed(self._aggregate, len(records))
        return records

    async def add(self, record: DailyRecord) -> None:
        tenant = self._assert_owned(record.tenant_id, "add")
        self._session.add(
            DailyRecordModel(
                id=record.id.value,
                tenant_id=tenant,
                flock_id=record.flock_id.value,
                record_date=record.record_date,
                egg_count=record.egg_count,
                notes=record.notes,
                created_at=record.created_at,
                updated_at=record.updated_at,
            )
        )
        await self._session.flush()
        self._probe.aggregate_saved(self._aggregate, record.id.value, tenant)

    async def save(self, record: DailyRecord) -> None:
        """Persist changes to an existing daily record.

        Raises:
            ValueError: If the record does not exist in the current tenant
        """
        tenant = self._assert_owned(record.tenant_id, "save")
        model = await self._get_model(record.id.value, "save")
        if model is None:
            raise ValueError(f"Daily record {record.id.value} does not exist")

        model.egg_count = record.egg_count
        model.notes = record.notes
        model.updated_at = record.updated_at
        await self._session.flush()
        self._probe.aggregate_saved(self._aggregate, record.id.value, tenant)

    async def delete(self, record: DailyRecord) -> bool:
        return await self._delete_row(record.id.value, record.tenant_id)

    async def exists_for_flock_and_date(
        self,
        flock_id: FlockId,
        record_date: datetime,
        exclude_id: DailyRecordId | None = None,
    ) -> bool:
        tenant = self._tenant("exists_for_flock_and_date")
        inner = select(DailyRecordModel.id).where(
            DailyRecordModel.tenant_id == tenant,
            DailyRecordModel.flock_id == flock_id.value,
            DailyRecordModel.record_date == to_utc_day(record_date),
        )
        if exclude_id is not None:
            inner = inner.where(DailyRecordModel.id != exclude_id.value)

        result = await self._session.execute(select(inner.exists()))
        return bool(result.scalar())

    @staticmethod
    def _to_domain(model: DailyRecordModel) -> DailyRecord:
        return DailyRecord(
            id=DailyRecordId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            flock_id=FlockId(value=model.flock_id),
            record_date=model.record_date,
            egg_count=model.egg_count,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

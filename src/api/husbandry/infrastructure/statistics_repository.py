"""PostgreSQL implementation of IStatisticsRepository.

Sums and counts run in the database, one query per figure, each filtered
by the current tenant. Derived figures such as percentages and running
cost per egg are computed by husbandry.domain.statistics.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func

from husbandry.domain.statistics import (
    DashboardStats,
    FlockEggTotal,
    Statistics,
    build_statistics,
)
from husbandry.infrastructure.models import (
    CoopModel,
    DailyRecordModel,
    FlockModel,
    PurchaseModel,
)
from husbandry.infrastructure.tenant_scoped import TenantScopedRepository
from husbandry.ports.repositories import IStatisticsRepository


class StatisticsRepository(TenantScopedRepository, IStatisticsRepository):
    """Aggregation queries over coops, flocks, daily records and purchases."""

    _model = FlockModel
    _aggregate = "statistics"

    async def get_dashboard_stats(self) -> DashboardStats:
        flock_stmt = self._scoped_select(
            "dashboard",
            func.count(FlockModel.id),
            func.coalesce(func.sum(FlockModel.hens), 0),
            func.coalesce(
                func.sum(FlockModel.hens + FlockModel.roosters + FlockModel.chicks),
                0,
            ),
        ).where(FlockModel.is_active.is_(True))
        active_flocks, total_hens, total_animals = (
            await self._session.execute(flock_stmt)
        ).one()

        coop_stmt = self._scoped_select(
            "dashboard", func.count(CoopModel.id), model=CoopModel
        ).where(CoopModel.is_active.is_(True))
        total_coops = (await self._session.execute(coop_stmt)).scalar()

        self._probe.statistics_computed("dashboard", 2)
        return DashboardStats(
            total_coops=int(total_coops or 0),
            active_flocks=int(active_flocks),
            total_hens=int(total_hens),
            total_animals=int(total_animals),
        )

    async def get_statistics(self, start: datetime, end: datetime) -> Statistics:
        costs_by_type = await self._costs_by_type(start, end)
        cost_by_day = await self._cost_by_day(start, end)
        eggs_by_day = await self._eggs_by_day(start, end)
        flock_totals = await self._eggs_by_flock(start, end)

        rows = len(costs_by_type) + len(cost_by_day) + len(eggs_by_day)
        self._probe.statistics_computed("period", rows + len(flock_totals))
        return build_statistics(
            start, end, costs_by_type, eggs_by_day, cost_by_day, flock_totals
        )

    async def _costs_by_type(
        self, start: datetime, end: datetime
    ) -> dict[str, Decimal]:
        stmt = (
            self._scoped_select(
                "costs_by_type",
                PurchaseModel.purchase_type,
                func.sum(PurchaseModel.amount),
                model=PurchaseModel,
            )
            .where(PurchaseModel.purchase_date.between(start, end))
            .group_by(PurchaseModel.purchase_type)
            .order_by(PurchaseModel.purchase_type)
        )
        result = await self._session.execute(stmt)
        return {kind: Decimal(amount) for kind, amount in result.all()}

    async def _cost_by_day(self, start: datetime, end: datetime) -> dict[date, Decimal]:
        stmt = (
            self._scoped_select(
                "cost_by_day",
                PurchaseModel.purchase_date,
                func.sum(PurchaseModel.amount),
                model=PurchaseModel,
            )
            .where(PurchaseModel.purchase_date.between(start, end))
            .group_by(PurchaseModel.purchase_date)
            .order_by(PurchaseModel.purchase_date)
        )
        result = await self._session.execute(stmt)
        return {day.date(): Decimal(amount) for day, amount in result.all()}

    async def _eggs_by_day(self, start: datetime, end: datetime) -> dict[date, int]:
        stmt = (
            self._scoped_select(
                "eggs_by_day",
                DailyRecordModel.record_date,
                func.sum(DailyRecordModel.egg_count),
                model=DailyRecordModel,
            )
            .where(DailyRecordModel.record_date.between(start, end))
            .group_by(DailyRecordModel.record_date)
            .order_by(DailyRecordModel.record_date)
        )
        result = await self._session.execute(stmt)
        return {day.date(): int(eggs) for day, eggs in result.all()}

    async def _eggs_by_flock(
        self, start: datetime, end: datetime
    ) -> list[FlockEggTotal]:
        """Eggs per flock within the period. Flocks without records are left out."""
        tenant = self._tenant("eggs_by_flock")
        stmt = (
            self._scoped_select(
                "eggs_by_flock",
                FlockModel.id,
                FlockModel.identifier,
                FlockModel.hens,
                func.sum(DailyRecordModel.egg_count),
                model=DailyRecordModel,
            )
            .select_from(DailyRecordModel)
            .join(FlockModel, FlockModel.id == DailyRecordModel.flock_id)
            .where(
                FlockModel.tenant_id == tenant,
                DailyRecordModel.record_date.between(start, end),
            )
            .group_by(FlockModel.id, FlockModel.identifier, FlockModel.hens)
            .order_by(FlockModel.identifier, FlockModel.id)
        )
        result = await self._session.execute(stmt)
        return [
            FlockEggTotal(
                flock_id=flock_id,
                identifier=identifier,
                hens=hens,
                total_eggs=int(eggs),
            )
            for flock_id, identifier, hens, eggs in result.all()
        ]

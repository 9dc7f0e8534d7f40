"""Farm statistics use cases."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from husbandry.application.observability import HusbandryServiceProbe
from husbandry.application.services.base import TenantScopedService
from husbandry.domain.statistics import DashboardStats, Statistics, reporting_period
from husbandry.ports.repositories import IStatisticsRepository
from shared_kernel.result import Error, Result
from shared_kernel.tenancy import TenantContextAccessor
from shared_kernel.validation import DomainValidationError


class StatisticsService(TenantScopedService):
    """Application service for dashboard counts and period statistics."""

    def __init__(
        self,
        session: AsyncSession,
        statistics_repository: IStatisticsRepository,
        accessor: TenantContextAccessor,
        probe: HusbandryServiceProbe | None = None,
    ):
        super().__init__(session, accessor, probe)
        self._statistics_repository = statistics_repository

    async def get_dashboard_stats(self) -> Result[DashboardStats]:
        tenant = self._current_tenant("get_dashboard_stats")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            stats = await self._statistics_repository.get_dashboard_stats()
        except Exception as e:
            return self._unexpected("get_dashboard_stats", e)

        return Result.success(stats)

    async def get_statistics(
        self, start_date: datetime | date, end_date: datetime | date
    ) -> Result[Statistics]:
        """Cost, production and productivity figures for a period.

        Both dates are taken as UTC calendar days and both are included.

        Returns:
            Validation error on start_date if it falls after end_date
        """
        tenant = self._current_tenant("get_statistics")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            start, end = reporting_period(start_date, end_date)
        except DomainValidationError as e:
            return self._invalid("get_statistics", e)

        try:
            statistics = await self._statistics_repository.get_statistics(start, end)
        except Exception as e:
            return self._unexpected("get_statistics", e)

        return Result.success(statistics)

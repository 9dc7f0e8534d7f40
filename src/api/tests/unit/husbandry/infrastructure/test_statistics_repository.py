"""Unit tests for StatisticsRepository."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from husbandry.infrastructure.statistics_repository import StatisticsRepository
from husbandry.ports.repositories import IStatisticsRepository
from shared_kernel.tenancy import MissingTenantContextError

START = datetime(2024, 5, 1, tzinfo=UTC)
END = datetime(2024, 5, 4, tzinfo=UTC)


def _rows(*rows) -> MagicMock:
    result = MagicMock()
    result.all.return_value = list(rows)
    result.one.return_value = rows[0] if rows else None
    return result


@pytest.fixture
def repository(repo_session, accessor):
    return StatisticsRepository(repo_session, accessor, probe=MagicMock())


def test_implements_protocol(repository):
    assert isinstance(repository, IStatisticsRepository)


class TestDashboardStats:
    @pytest.mark.asyncio
    async def test_counts_active_flocks_and_coops(
        self, repository, repo_session, scalar_result
    ):
        repo_session.execute.side_effect = [_rows((2, 15, 21)), scalar_result(3)]

        stats = await repository.get_dashboard_stats()

        assert (stats.total_coops, stats.active_flocks) == (3, 2)
        assert (stats.total_hens, stats.total_animals) == (15, 21)

    @pytest.mark.asyncio
    async def test_queries_are_tenant_scoped_and_skip_archived(
        self, repository, repo_session, tenant_id, scalar_result, compile_stmt
    ):
        repo_session.execute.side_effect = [_rows((0, 0, 0)), scalar_result(0)]

        await repository.get_dashboard_stats()

        flock_call, coop_call = repo_session.execute.call_args_list
        flock_sql, flock_params = compile_stmt(flock_call[0][0])
        coop_sql, coop_params = compile_stmt(coop_call[0][0])
        assert "flocks.tenant_id = " in flock_sql
        assert "flocks.is_active IS true" in flock_sql
        assert "coalesce(sum(flocks.hens" in flock_sql
        assert "coops.tenant_id = " in coop_sql
        assert "coops.is_active IS true" in coop_sql
        assert tenant_id.value in flock_params.values()
        assert tenant_id.value in coop_params.values()

    @pytest.mark.asyncio
    async def test_requires_tenant(self, repo_session, anonymous_accessor):
        repository = StatisticsRepository(
            repo_session, anonymous_accessor, probe=MagicMock()
        )

        with pytest.raises(MissingTenantContextError):
            await repository.get_dashboard_stats()

        repo_session.execute.assert_not_called()


class TestPeriodStatistics:
    @pytest.mark.asyncio
    async def test_combines_aggregates(self, repository, repo_session):
        repo_session.execute.side_effect = [
            _rows(("bedding", Decimal("15.00")), ("feed", Decimal("45.00"))),
            _rows(
                (datetime(2024, 5, 1, tzinfo=UTC), Decimal("45.00")),
                (datetime(2024, 5, 4, tzinfo=UTC), Decimal("15.00")),
            ),
            _rows(
                (datetime(2024, 5, 2, tzinfo=UTC), 10),
                (datetime(2024, 5, 4, tzinfo=UTC), 20),
            ),
            _rows(("01HFLOCK", "Spring 2024", 5, 30)),
        ]

        statistics = await repository.get_statistics(START, END)

        assert [i.purchase_type for i in statistics.cost_breakdown] == [
            "bedding",
            "feed",
        ]
        assert [p.day for p in statistics.production_trend] == [
            date(2024, 5, 2),
            date(2024, 5, 4),
        ]
        assert statistics.cost_per_egg_trend[-1].cost_per_egg == Decimal("2")
        assert statistics.flock_productivity[0].identifier == "Spring 2024"
        assert statistics.flock_productivity[0].eggs_per_hen_per_day == Decimal("1.5")
        assert statistics.summary.total_eggs == 30
        repository._probe.statistics_computed.assert_called_once_with("period", 7)

    @pytest.mark.asyncio
    async def test_every_query_is_bounded_and_tenant_scoped(
        self, repository, repo_session, tenant_id, compile_stmt
    ):
        repo_session.execute.side_effect = [_rows() for _ in range(4)]

        await repository.get_statistics(START, END)

        compiled = [
            compile_stmt(call[0][0]) for call in repo_session.execute.call_args_list
        ]
        by_type, by_day, eggs, per_flock = (sql for sql, _ in compiled)
        assert "purchases.tenant_id = " in by_type
        assert "GROUP BY purchases.purchase_type" in by_type
        assert "purchases.purchase_date BETWEEN" in by_day
        assert "GROUP BY purchases.purchase_date" in by_day
        assert "daily_records.record_date BETWEEN" in eggs
        assert "daily_records.tenant_id = " in eggs
        assert "JOIN flocks ON flocks.id = daily_records.flock_id" in per_flock
        assert "flocks.tenant_id = " in per_flock
        assert "daily_records.tenant_id = " in per_flock
        for _, params in compiled:
            assert tenant_id.value in params.values()
            assert START in params.values()
            assert END in params.values()

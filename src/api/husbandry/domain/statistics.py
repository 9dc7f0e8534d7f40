"""Read models for farm statistics.

Statistics are derived from flocks, daily records and purchases of one
tenant; nothing here is persisted. Days are UTC calendar days, and both
ends of a reporting period are included.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from shared_kernel.validation import DomainValidationError, to_utc_day

ZERO = Decimal("0")


@dataclass(frozen=True)
class DashboardStats:
    """Headline counts over active coops and active flocks."""

    total_coops: int
    active_flocks: int
    total_hens: int
    total_animals: int


@dataclass(frozen=True)
class CostBreakdownItem:
    purchase_type: str
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class ProductionPoint:
    day: date
    eggs: int


@dataclass(frozen=True)
class CostPerEggPoint:
    """Cumulative spend divided by cumulative eggs up to and including day."""

    day: date
    cost_per_egg: Decimal


@dataclass(frozen=True)
class FlockEggTotal:
    """Eggs a flock laid within a period, with its current hen count."""

    flock_id: str
    identifier: str
    hens: int
    total_eggs: int


@dataclass(frozen=True)
class FlockProductivity:
    flock_id: str
    identifier: str
    total_eggs: int
    hens: int
    eggs_per_hen_per_day: Decimal


@dataclass(frozen=True)
class StatisticsSummary:
    total_eggs: int
    total_cost: Decimal
    avg_cost_per_egg: Decimal
    avg_eggs_per_day: Decimal


@dataclass(frozen=True)
class Statistics:
    start_date: datetime
    end_date: datetime
    cost_breakdown: list[CostBreakdownItem]
    production_trend: list[ProductionPoint]
    cost_per_egg_trend: list[CostPerEggPoint]
    flock_productivity: list[FlockProductivity]
    summary: StatisticsSummary

    @property
    def day_count(self) -> int:
        return period_days(self.start_date, self.end_date)


def reporting_period(
    start_date: datetime | date, end_date: datetime | date
) -> tuple[datetime, datetime]:
    """Normalize a period to UTC midnights.

    Raises:
        DomainValidationError: If start_date falls after end_date
    """
    start = to_utc_day(start_date)
    end = to_utc_day(end_date)
    if start > end:
        raise DomainValidationError(
            "start_date", "start_date must be on or before end_date"
        )
    return start, end


def period_days(start: datetime, end: datetime) -> int:
    return (end - start).days + 1


def build_cost_breakdown(costs_by_type: dict[str, Decimal]) -> list[CostBreakdownItem]:
    """Share of total spend per purchase type, in percent.

    All shares are 0 when nothing was spent.
    """
    total = sum(costs_by_type.values(), ZERO)
    return [
        CostBreakdownItem(
            purchase_type=purchase_type,
            amount=amount,
            percentage=amount / total * 100 if total > 0 else ZERO,
        )
        for purchase_type, amount in costs_by_type.items()
    ]


def build_cost_per_egg_trend(
    eggs_by_day: dict[date, int], cost_by_day: dict[date, Decimal]
) -> list[CostPerEggPoint]:
    """Running cost per egg over every day with eggs or spend.

    Days before the first egg carry spend forward but produce no point.
    """
    points = []
    cumulative_cost = ZERO
    cumulative_eggs = 0
    for day in sorted(eggs_by_day.keys() | cost_by_day.keys()):
        cumulative_cost += cost_by_day.get(day, ZERO)
        cumulative_eggs += eggs_by_day.get(day, 0)
        if cumulative_eggs > 0:
            points.append(
                CostPerEggPoint(day=day, cost_per_egg=cumulative_cost / cumulative_eggs)
            )
    return points


def build_flock_productivity(
    totals: list[FlockEggTotal], day_count: int
) -> list[FlockProductivity]:
    return [
        FlockProductivity(
            flock_id=total.flock_id,
            identifier=total.identifier,
            total_eggs=total.total_eggs,
            hens=total.hens,
            eggs_per_hen_per_day=(
                Decimal(total.total_eggs) / (total.hens * day_count)
                if total.hens > 0
                else ZERO
            ),
        )
        for total in totals
    ]


def build_statistics(
    start: datetime,
    end: datetime,
    costs_by_type: dict[str, Decimal],
    eggs_by_day: dict[date, int],
    cost_by_day: dict[date, Decimal],
    flock_totals: list[FlockEggTotal],
) -> Statistics:
    """Assemble the statistics of a period from its aggregated rows.

    Args:
        start: First day of the period (UTC midnight)
        end: Last day of the period (UTC midnight)
        costs_by_type: Spend per purchase type
        eggs_by_day: Eggs collected per day, across all flocks
        cost_by_day: Spend per purchase day
        flock_totals: Eggs per flock within the period
    """
    day_count = period_days(start, end)
    total_eggs = sum(eggs_by_day.values())
    total_cost = sum(costs_by_type.values(), ZERO)

    return Statistics(
        start_date=start,
        end_date=end,
        cost_breakdown=build_cost_breakdown(costs_by_type),
        production_trend=[
            ProductionPoint(day=day, eggs=eggs)
            for day, eggs in sorted(eggs_by_day.items())
        ],
        cost_per_egg_trend=build_cost_per_egg_trend(eggs_by_day, cost_by_day),
        flock_productivity=build_flock_productivity(flock_totals, day_count),
        summary=StatisticsSummary(
            total_eggs=total_eggs,
            total_cost=total_cost,
            avg_cost_per_egg=total_cost / total_eggs if total_eggs > 0 else ZERO,
            avg_eggs_per_day=Decimal(total_eggs) / day_count,
        ),
    )

"""Ports for the husbandry bounded context."""

from husbandry.ports.repositories import (
    DEFAULT_SEARCH_LIMIT,
    ICoopRepository,
    IDailyRecordRepository,
    IFlockHistoryRepository,
    IFlockRepository,
    IPurchaseRepository,
    IStatisticsRepository,
)

__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "ICoopRepository",
    "IDailyRecordRepository",
    "IFlockHistoryRepository",
    "IFlockRepository",
    "IPurchaseRepository",
    "IStatisticsRepository",
]

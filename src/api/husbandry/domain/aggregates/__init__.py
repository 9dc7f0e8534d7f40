"""Aggregates for the husbandry bounded context."""

from husbandry.domain.aggregates.coop import Coop
from husbandry.domain.aggregates.daily_record import DailyRecord
from husbandry.domain.aggregates.flock import Flock
from husbandry.domain.aggregates.flock_history import FlockHistory
from husbandry.domain.aggregates.purchase import Purchase

__all__ = [
    "Coop",
    "DailyRecord",
    "Flock",
    "FlockHistory",
    "Purchase",
]

"""Application services for the husbandry bounded context.

Application services orchestrate domain aggregates and tenant-scoped
repositories to fulfill use cases. They are the "front door" to the
husbandry context and always answer with a Result.
"""

from husbandry.application.services.coop_service import CoopService
from husbandry.application.services.daily_record_service import DailyRecordService
from husbandry.application.services.flock_service import FlockService
from husbandry.application.services.purchase_service import PurchaseService
from husbandry.application.services.statistics_service import StatisticsService

__all__ = [
    "CoopService",
    "DailyRecordService",
    "FlockService",
    "PurchaseService",
    "StatisticsService",
]

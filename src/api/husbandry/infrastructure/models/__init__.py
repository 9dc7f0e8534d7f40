"""SQLAlchemy ORM models for the husbandry bounded context.

Every table carries a tenant_id column and is covered by a row-level
security policy.
"""

from husbandry.infrastructure.models.coop import CoopModel
from husbandry.infrastructure.models.daily_record import DailyRecordModel
from husbandry.infrastructure.models.flock import FlockModel
from husbandry.infrastructure.models.flock_history import FlockHistoryModel
from husbandry.infrastructure.models.purchase import PurchaseModel

__all__ = [
    "CoopModel",
    "DailyRecordModel",
    "FlockHistoryModel",
    "FlockModel",
    "PurchaseModel",
]

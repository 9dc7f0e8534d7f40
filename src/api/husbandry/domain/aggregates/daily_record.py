"""DailyRecord aggregate: one day of egg production for a flock."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime

from husbandry.domain.value_objects import DailyRecordId, FlockId
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import (
    day_not_in_future,
    max_length,
    non_negative,
    to_utc_day,
)

NOTES_MAX_LENGTH = 500


@dataclass
class DailyRecord:
    """Eggs collected from one flock on one calendar day.

    Business rules:
    - record_date is normalized to UTC midnight and must not be after today
    - egg_count is never negative
    - notes are optional, at most 500 characters
    - The record date is fixed at creation; updates change only the count
      and notes
    """

    id: DailyRecordId
    tenant_id: TenantId
    flock_id: FlockId
    record_date: datetime
    egg_count: int
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        flock_id: FlockId,
        record_date: datetime | date,
        egg_count: int,
        notes: str | None = None,
    ) -> DailyRecord:
        """Factory method for creating a daily record.

        Raises:
            DomainValidationError: If any field is invalid
        """
        max_length(notes, NOTES_MAX_LENGTH, "notes")
        non_negative(egg_count, "egg_count")
        now = datetime.now(UTC)
        record_day = to_utc_day(record_date)
        day_not_in_future(record_day, now, "record_date")

        return cls(
            id=DailyRecordId.generate(),
            tenant_id=tenant_id,
            flock_id=flock_id,
            record_date=record_day,
            egg_count=egg_count,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    def update(self, egg_count: int, notes: str | None = None) -> None:
        """Correct the egg count and notes.

        Raises:
            DomainValidationError: If egg count or notes are invalid
        """
        max_length(notes, NOTES_MAX_LENGTH, "notes")
        non_negative(egg_count, "egg_count")

        self.egg_count = egg_count
        self.notes = notes
        self.updated_at = datetime.now(UTC)

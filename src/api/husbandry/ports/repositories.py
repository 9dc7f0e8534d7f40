"""Repository protocols (ports) for the husbandry bounded context.

Every repository is tenant-scoped: it is built with a TenantContextAccessor
and filters every read and write by the accessor's tenant. No method takes
a tenant parameter, so a caller cannot ask for another tenant's rows.
A row that exists but belongs to another tenant is reported exactly like a
missing row (None, False or an empty list).

Implementations raise MissingTenantContextError when invoked without a
resolved tenant.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from husbandry.domain.aggregates import (
    Coop,
    DailyRecord,
    Flock,
    FlockHistory,
    Purchase,
)
from husbandry.domain.statistics import DashboardStats, Statistics
from husbandry.domain.value_objects import (
    CoopId,
    DailyRecordId,
    FlockHistoryId,
    FlockId,
    PurchaseId,
    PurchaseType,
)

DEFAULT_SEARCH_LIMIT = 20


@runtime_checkable
class ICoopRepository(Protocol):
    """Repository for Coop aggregate persistence."""

    async def get_by_id(self, coop_id: CoopId) -> Coop | None:
        """Retrieve a coop of the current tenant, or None."""
        ...

    async def list_all(self, include_archived: bool = False) -> list[Coop]:
        """List the current tenant's coops, newest first.

        Args:
            include_archived: Include inactive coops as well
        """
        ...

    async def add(self, coop: Coop) -> None:
        """Insert a new coop."""
        ...

    async def save(self, coop: Coop) -> None:
        """Persist changes to an existing coop."""
        ...

    async def delete(self, coop: Coop) -> bool:
        """Delete a coop. Returns False if it was not found."""
        ...

    async def exists_by_name(self, name: str) -> bool:
        """Return True if the current tenant already has a coop with this name."""
        ...

    async def has_flocks(self, coop_id: CoopId) -> bool:
        """Return True if any flock (active or archived) lives in the coop."""
        ...

    async def search_names(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[str]:
        """Autocomplete coop names.

        Case-insensitive partial match, distinct, alphabetical, at most
        limit results. A blank query returns an empty list.
        """
        ...


@runtime_checkable
class IFlockRepository(Protocol):
    """Repository for Flock aggregate persistence.

    Flocks are loaded with their full history in insertion order. Saving a
    flock also inserts any history entries appended since it was loaded.
    """

    async def get_by_id(
        self, flock_id: FlockId, for_update: bool = False
    ) -> Flock | None:
        """Retrieve a flock of the current tenant with its history, or None.

        With for_update the flock row is locked until the transaction ends.
        Use cases that change a flock load it this way, so concurrent
        changes to one flock are applied one after the other.
        """
        ...

    async def list_all(
        self,
        coop_id: CoopId | None = None,
        include_archived: bool = False,
    ) -> list[Flock]:
        """List the current tenant's flocks, newest first, with history."""
        ...

    async def add(self, flock: Flock) -> None:
        """Insert a new flock together with its pending history entries."""
        ...

    async def save(self, flock: Flock) -> None:
        """Persist flock changes and append pending history entries."""
        ...

    async def exists_in_coop(self, identifier: str, coop_id: CoopId) -> bool:
        """Return True if a flock with this identifier lives in the coop."""
        ...

    async def search_identifiers(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[str]:
        """Autocomplete flock identifiers (same rules as coop names)."""
        ...


@runtime_checkable
class IFlockHistoryRepository(Protocol):
    """Repository for reading history entries and replacing their notes.

    History entries are only ever inserted through IFlockRepository. This
    repository never deletes entries and never writes any field other than
    notes and updated_at.
    """

    async def get_by_id(self, entry_id: FlockHistoryId) -> FlockHistory | None:
        """Retrieve a history entry of the current tenant, or None."""
        ...

    async def list_by_flock(self, flock_id: FlockId) -> list[FlockHistory]:
        """List a flock's history in insertion (chronological) order."""
        ...

    async def save_notes(self, entry: FlockHistory) -> None:
        """Write the entry's notes and updated_at."""
        ...


@runtime_checkable
class IDailyRecordRepository(Protocol):
    """Repository for DailyRecord aggregate persistence."""

    async def get_by_id(self, record_id: DailyRecordId) -> DailyRecord | None:
        """Retrieve a daily record of the current tenant, or None."""
        ...

    async def list_all(
        self,
        flock_id: FlockId | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[DailyRecord]:
        """List daily records, newest record date first.

        Args:
            flock_id: Only records of this flock
            start_date: Only records on or after this day
            end_date: Only records on or before this day
        """
        ...

    async def add(self, record: DailyRecord) -> None:
        """Insert a new daily record."""
        ...

    async def save(self, record: DailyRecord) -> None:
        """Persist changes to an existing daily record."""
        ...

    async def delete(self, record: DailyRecord) -> bool:
        """Delete a daily record. Returns False if it was not found."""
        ...

    async def exists_for_flock_and_date(
        self,
        flock_id: FlockId,
        record_date: datetime,
        exclude_id: DailyRecordId | None = None,
    ) -> bool:
        """Return True if the flock already has a record for that day."""
        ...


@runtime_checkable
class IPurchaseRepository(Protocol):
    """Repository for Purchase aggregate persistence."""

    async def get_by_id(self, purchase_id: PurchaseId) -> Purchase | None:
        """Retrieve a purchase of the current tenant, or None."""
        ...

    async def list_all(
        self,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        purchase_type: PurchaseType | None = None,
        coop_id: CoopId | None = None,
    ) -> list[Purchase]:
        """List purchases, newest purchase date first, optionally filtered."""
        ...

    async def add(self, purchase: Purchase) -> None:
        """Insert a new purchase."""
        ...

    async def save(self, purchase: Purchase) -> None:
        """Persist changes to an existing purchase."""
        ...

    async def delete(self, purchase: Purchase) -> bool:
        """Delete a purchase. Returns False if it was not found."""
        ...

    async def search_names(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[str]:
        """Autocomplete purchase names (same rules as coop names)."""
        ...


@runtime_checkable
class IStatisticsRepository(Protocol):
    """Read-only aggregates over the current tenant's farm data."""

    async def get_dashboard_stats(self) -> DashboardStats:
        """Count active coops, active flocks and the animals in them.

        A tenant without data gets all zeros.
        """
        ...

    async def get_statistics(self, start: datetime, end: datetime) -> Statistics:
        """Compute statistics for the days start through end.

        Args:
            start: First day, as UTC midnight
            end: Last day, as UTC midnight; not before start
        """
        ...

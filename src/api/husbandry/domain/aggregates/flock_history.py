"""Flock composition history entry."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime

from husbandry.domain.value_objects import FlockHistoryId, FlockId
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import max_length, non_negative, require_text

REASON_MAX_LENGTH = 50
NOTES_MAX_LENGTH = 500


@dataclass(frozen=True)
class FlockHistory:
    """Immutable snapshot of a flock's composition at one point in time.

    Entries are appended by the Flock aggregate whenever its counts change
    and are never deleted or reordered. Notes are the only field that may
    change after creation, through update_notes(), which returns a new
    entry rather than mutating this one.

    Attributes:
        id: Entry identifier
        tenant_id: Owning tenant (same as the flock's)
        flock_id: Flock this snapshot belongs to
        change_date: When the composition change happened (UTC)
        hens: Hen count after the change
        roosters: Rooster count after the change
        chicks: Chick count after the change
        reason: Why the composition changed, e.g. "Initial" or "Sale"
        notes: Optional free-form notes
        created_at: When the entry was recorded
        updated_at: When the notes were last changed
    """

    id: FlockHistoryId
    tenant_id: TenantId
    flock_id: FlockId
    change_date: datetime
    hens: int
    roosters: int
    chicks: int
    reason: str
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        flock_id: FlockId,
        change_date: datetime,
        hens: int,
        roosters: int,
        chicks: int,
        reason: str,
        notes: str | None = None,
    ) -> FlockHistory:
        """Create a new history entry.

        Raises:
            DomainValidationError: If reason, notes or a count is invalid
        """
        require_text(reason, "reason")
        max_length(reason, REASON_MAX_LENGTH, "reason")
        max_length(notes, NOTES_MAX_LENGTH, "notes")
        non_negative(hens, "hens")
        non_negative(roosters, "roosters")
        non_negative(chicks, "chicks")

        now = datetime.now(UTC)
        return cls(
            id=FlockHistoryId.generate(),
            tenant_id=tenant_id,
            flock_id=flock_id,
            change_date=change_date,
            hens=hens,
            roosters=roosters,
            chicks=chicks,
            reason=reason,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    def update_notes(self, notes: str | None) -> FlockHistory:
        """Return a copy of this entry with new notes.

        Only notes and updated_at differ in the returned entry.

        Raises:
            DomainValidationError: If notes exceed 500 characters
        """
        max_length(notes, NOTES_MAX_LENGTH, "notes")
        return replace(self, notes=notes, updated_at=datetime.now(UTC))

"""Flock aggregate and its composition history ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from husbandry.domain.aggregates.flock_history import NOTES_MAX_LENGTH, FlockHistory
from husbandry.domain.value_objects import CompositionReason, CoopId, FlockId
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import (
    DomainValidationError,
    max_length,
    non_negative,
    normalize_utc,
    not_in_future,
    positive,
    require_text,
)

IDENTIFIER_MAX_LENGTH = 50


@dataclass
class Flock:
    """A group of birds kept in one coop.

    Business rules:
    - Identifier is required, at most 50 characters, not necessarily unique
    - Hatch date is stored in UTC and must not be in the future
    - Hens, roosters and chicks are never negative and at least one of them
      is positive at all times; a violation is reported against "hens"
    - Metadata changes (identifier, hatch date) never touch the history
    - Every composition change appends exactly one FlockHistory entry,
      dated at the time of the change and holding the new counts

    History ledger:
    - history holds every entry in insertion order, which is chronological
    - Entries appended since the aggregate was loaded are also queued and
      can be drained with collect_new_history() so the repository persists
      them in the same transaction as the flock itself

    Direct construction performs no validation so that persisted flocks can
    be reconstituted as-is. Use create() for new flocks.
    """

    id: FlockId
    tenant_id: TenantId
    coop_id: CoopId
    identifier: str
    hatch_date: datetime
    hens: int
    roosters: int
    chicks: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    history: list[FlockHistory] = field(default_factory=list)
    _pending_history: list[FlockHistory] = field(
        default_factory=list, repr=False, compare=False
    )

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        coop_id: CoopId,
        identifier: str,
        hatch_date: datetime,
        hens: int,
        roosters: int,
        chicks: int,
        notes: str | None = None,
    ) -> Flock:
        """Factory method for creating a new flock.

        The new flock carries exactly one history entry with reason
        "Initial" mirroring the initial counts and notes.

        Args:
            tenant_id: Owning tenant
            coop_id: Coop the flock lives in
            identifier: Human-readable label (1-50 characters)
            hatch_date: When the flock hatched; naive values are taken as UTC
            hens: Initial hen count
            roosters: Initial rooster count
            chicks: Initial chick count
            notes: Optional notes for the initial history entry

        Returns:
            A new active Flock

        Raises:
            DomainValidationError: If any invariant is violated
        """
        require_text(identifier, "identifier")
        max_length(identifier, IDENTIFIER_MAX_LENGTH, "identifier")
        max_length(notes, NOTES_MAX_LENGTH, "notes")
        _check_counts(hens, roosters, chicks)
        now = datetime.now(UTC)
        hatch_date = normalize_utc(hatch_date)
        not_in_future(hatch_date, now, "hatch_date")
        _require_animals(hens, roosters, chicks)

        flock = cls(
            id=FlockId.generate(),
            tenant_id=tenant_id,
            coop_id=coop_id,
            identifier=identifier,
            hatch_date=hatch_date,
            hens=hens,
            roosters=roosters,
            chicks=chicks,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        flock._append_history(
            FlockHistory.create(
                tenant_id=tenant_id,
                flock_id=flock.id,
                change_date=now,
                hens=hens,
                roosters=roosters,
                chicks=chicks,
                reason=CompositionReason.INITIAL.value,
                notes=notes,
            )
        )
        return flock

    def update(self, identifier: str, hatch_date: datetime) -> None:
        """Change the flock's metadata. No history entry is written.

        Raises:
            DomainValidationError: If identifier or hatch date is invalid
        """
        require_text(identifier, "identifier")
        max_length(identifier, IDENTIFIER_MAX_LENGTH, "identifier")
        now = datetime.now(UTC)
        hatch_date = normalize_utc(hatch_date)
        not_in_future(hatch_date, now, "hatch_date")

        self.identifier = identifier
        self.hatch_date = hatch_date
        self.updated_at = now

    def update_composition(
        self,
        hens: int,
        roosters: int,
        chicks: int,
        reason: str,
        notes: str | None = None,
    ) -> FlockHistory:
        """Set new counts and record them in the history ledger.

        Args:
            hens: Hen count after the change
            roosters: Rooster count after the change
            chicks: Chick count after the change
            reason: Why the composition changed (1-50 characters)
            notes: Optional notes (at most 500 characters)

        Returns:
            The history entry appended for this change

        Raises:
            DomainValidationError: If the flock is archived or any invariant is
                violated; the flock and its history are left unchanged
        """
        now = datetime.now(UTC)
        entry = FlockHistory.create(
            tenant_id=self.tenant_id,
            flock_id=self.id,
            change_date=now,
            hens=hens,
            roosters=roosters,
            chicks=chicks,
            reason=reason,
            notes=notes,
        )
        _require_animals(hens, roosters, chicks)
        if not self.is_active:
            raise DomainValidationError(
                "flock_id", "Cannot change the composition of an archived flock"
            )

        self.hens = hens
        self.roosters = roosters
        self.chicks = chicks
        self.updated_at = now
        self._append_history(entry)
        return entry

    def mature_chicks(
        self,
        chicks_to_mature: int,
        hens: int,
        roosters: int,
        notes: str | None = None,
    ) -> FlockHistory:
        """Turn chicks into adult hens and roosters.

        Records a composition change with reason "Maturation".

        Args:
            chicks_to_mature: Number of chicks that grew up (at least 1)
            hens: How many of them became hens
            roosters: How many of them became roosters

        Raises:
            DomainValidationError: If the flock is archived, has fewer chicks
                than chicks_to_mature, or hens + roosters does not add up
        """
        positive(chicks_to_mature, "chicks_to_mature")
        non_negative(hens, "hens")
        non_negative(roosters, "roosters")
        if not self.is_active:
            raise DomainValidationError(
                "flock_id", "Cannot mature chicks in an archived flock"
            )
        if chicks_to_mature > self.chicks:
            raise DomainValidationError(
                "chicks_to_mature",
                f"Cannot mature {chicks_to_mature} chicks: "
                f"flock only has {self.chicks} chicks",
            )
        if hens + roosters != chicks_to_mature:
            raise DomainValidationError(
                "chicks_to_mature",
                "The sum of hens and roosters must equal chicks_to_mature",
            )

        return self.update_composition(
            hens=self.hens + hens,
            roosters=self.roosters + roosters,
            chicks=self.chicks - chicks_to_mature,
            reason=CompositionReason.MATURATION.value,
            notes=notes,
        )

    def archive(self) -> None:
        """Mark the flock inactive. History is kept."""
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def activate(self) -> None:
        """Mark the flock active again."""
        self.is_active = True
        self.updated_at = datetime.now(UTC)

    @property
    def total_animals(self) -> int:
        return self.hens + self.roosters + self.chicks

    @property
    def latest_history(self) -> FlockHistory | None:
        """Most recent history entry, relying on insertion order."""
        if not self.history:
            return None
        return self.history[-1]

    def collect_new_history(self) -> list[FlockHistory]:
        """Return and clear history entries not yet persisted.

        Returns:
            Entries appended since the last call, oldest first
        """
        entries = self._pending_history.copy()
        self._pending_history.clear()
        return entries

    def _append_history(self, entry: FlockHistory) -> None:
        self.history.append(entry)
        self._pending_history.append(entry)


def _check_counts(hens: int, roosters: int, chicks: int) -> None:
    non_negative(hens, "hens")
    non_negative(roosters, "roosters")
    non_negative(chicks, "chicks")


def _require_animals(hens: int, roosters: int, chicks: int) -> None:
    if hens + roosters + chicks == 0:
        raise DomainValidationError(
            "hens", "A flock must contain at least one hen, rooster or chick"
        )

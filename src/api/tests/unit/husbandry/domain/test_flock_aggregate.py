"""Unit tests for the Flock aggregate and its history ledger."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from husbandry.domain.aggregates import Flock
from husbandry.domain.aggregates import flock as flock_module
from husbandry.domain.value_objects import CoopId, FlockId
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import DomainValidationError


@pytest.fixture
def tenant_id() -> TenantId:
    return TenantId.generate()


@pytest.fixture
def coop_id() -> CoopId:
    return CoopId.generate()


@pytest.fixture
def flock(tenant_id, coop_id) -> Flock:
    return Flock.create(
        tenant_id=tenant_id,
        coop_id=coop_id,
        identifier="Spring 2024",
        hatch_date=datetime.now(UTC) - timedelta(days=30),
        hens=10,
        roosters=2,
        chicks=5,
    )


class TestFlockCreation:
    """Tests for Flock.create()."""

    def test_creates_flock_with_initial_history(self, flock, tenant_id, coop_id):
        assert isinstance(flock.id, FlockId)
        assert flock.tenant_id == tenant_id
        assert flock.coop_id == coop_id
        assert flock.is_active is True
        assert len(flock.history) == 1
        assert flock.history[0].reason == "Initial"

    def test_initial_history_mirrors_counts(self, flock):
        entry = flock.history[0]

        assert (entry.hens, entry.roosters, entry.chicks) == (10, 2, 5)
        assert entry.flock_id == flock.id
        assert entry.tenant_id == flock.tenant_id

    def test_initial_notes_go_to_history(self, tenant_id, coop_id):
        flock = Flock.create(
            tenant_id=tenant_id,
            coop_id=coop_id,
            identifier="Brood",
            hatch_date=datetime.now(UTC),
            hens=1,
            roosters=0,
            chicks=0,
            notes="from the neighbour",
        )

        assert flock.history[0].notes == "from the neighbour"

    def test_all_counts_zero_is_rejected_on_hens(self, tenant_id, coop_id):
        with pytest.raises(DomainValidationError) as exc_info:
            Flock.create(
                tenant_id=tenant_id,
                coop_id=coop_id,
                identifier="Empty",
                hatch_date=datetime.now(UTC),
                hens=0,
                roosters=0,
                chicks=0,
            )

        assert exc_info.value.field == "hens"

    @pytest.mark.parametrize("field", ["hens", "roosters", "chicks"])
    def test_negative_count_is_rejected(self, tenant_id, coop_id, field):
        counts = {"hens": 1, "roosters": 1, "chicks": 1, field: -1}

        with pytest.raises(DomainValidationError) as exc_info:
            Flock.create(
                tenant_id=tenant_id,
                coop_id=coop_id,
                identifier="Bad",
                hatch_date=datetime.now(UTC),
                **counts,
            )

        assert exc_info.value.field == field

    def test_identifier_longer_than_50_characters_is_rejected(
        self, tenant_id, coop_id
    ):
        with pytest.raises(DomainValidationError) as exc_info:
            Flock.create(
                tenant_id=tenant_id,
                coop_id=coop_id,
                identifier="x" * 51,
                hatch_date=datetime.now(UTC),
                hens=1,
                roosters=0,
                chicks=0,
            )

        assert exc_info.value.field == "identifier"

    def test_hatch_date_in_the_future_is_rejected(self, tenant_id, coop_id):
        with pytest.raises(DomainValidationError) as exc_info:
            Flock.create(
                tenant_id=tenant_id,
                coop_id=coop_id,
                identifier="Future",
                hatch_date=datetime.now(UTC) + timedelta(days=1),
                hens=1,
                roosters=0,
                chicks=0,
            )

        assert exc_info.value.field == "hatch_date"

    def test_hatch_date_equal_to_now_is_accepted(
        self, tenant_id, coop_id, monkeypatch
    ):
        frozen = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)

        class _FrozenClock(datetime):
            @classmethod
            def now(cls, tz=None):
                return frozen

        monkeypatch.setattr(flock_module, "datetime", _FrozenClock)

        flock = Flock.create(
            tenant_id=tenant_id,
            coop_id=coop_id,
            identifier="Hatched today",
            hatch_date=frozen,
            hens=1,
            roosters=0,
            chicks=0,
        )

        assert flock.hatch_date == frozen
        assert flock.created_at == frozen

    def test_naive_hatch_date_is_taken_as_utc(self, tenant_id, coop_id):
        naive = datetime(2024, 3, 1, 12, 30)

        flock = Flock.create(
            tenant_id=tenant_id,
            coop_id=coop_id,
            identifier="Naive",
            hatch_date=naive,
            hens=1,
            roosters=0,
            chicks=0,
        )

        assert flock.hatch_date == datetime(2024, 3, 1, 12, 30, tzinfo=UTC)

    def test_aware_hatch_date_is_converted_but_not_truncated(
        self, tenant_id, coop_id
    ):
        prague = timezone(timedelta(hours=2))

        flock = Flock.create(
            tenant_id=tenant_id,
            coop_id=coop_id,
            identifier="Aware",
            hatch_date=datetime(2024, 3, 1, 1, 0, tzinfo=prague),
            hens=1,
            roosters=0,
            chicks=0,
        )

        assert flock.hatch_date == datetime(2024, 2, 29, 23, 0, tzinfo=UTC)

    def test_identifier_error_wins_over_count_error(self, tenant_id, coop_id):
        """Required checks run before numeric checks."""
        with pytest.raises(DomainValidationError) as exc_info:
            Flock.create(
                tenant_id=tenant_id,
                coop_id=coop_id,
                identifier="",
                hatch_date=datetime.now(UTC),
                hens=-1,
                roosters=0,
                chicks=0,
            )

        assert exc_info.value.field == "identifier"


class TestFlockUpdate:
    """Tests for Flock.update()."""

    def test_update_changes_metadata_without_history(self, flock):
        new_hatch = datetime.now(UTC) - timedelta(days=60)

        flock.update(identifier="Renamed", hatch_date=new_hatch)

        assert flock.identifier == "Renamed"
        assert flock.hatch_date == new_hatch
        assert len(flock.history) == 1

    def test_failed_update_leaves_flock_unchanged(self, flock):
        with pytest.raises(DomainValidationError):
            flock.update(
                identifier="Renamed",
                hatch_date=datetime.now(UTC) + timedelta(days=1),
            )

        assert flock.identifier == "Spring 2024"


class TestUpdateComposition:
    """Tests for Flock.update_composition()."""

    def test_appends_history_entry(self, flock):
        entry = flock.update_composition(15, 3, 2, "Purchase", "bought more")

        assert len(flock.history) == 2
        assert flock.hens == 15
        assert flock.roosters == 3
        assert flock.chicks == 2
        assert flock.history[-1] is entry
        assert entry.reason == "Purchase"
        assert entry.notes == "bought more"

    def test_n_changes_yield_n_plus_one_entries_in_order(self, flock):
        flock.update_composition(9, 2, 5, "Death")
        flock.update_composition(9, 1, 5, "Sale")
        flock.update_composition(12, 3, 0, "Maturation")

        assert len(flock.history) == 4
        assert [e.reason for e in flock.history] == [
            "Initial",
            "Death",
            "Sale",
            "Maturation",
        ]
        assert (flock.history[-1].hens, flock.history[-1].chicks) == (12, 0)
        assert flock.latest_history is flock.history[-1]
        change_dates = [e.change_date for e in flock.history]
        assert change_dates == sorted(change_dates)

    def test_all_zero_is_rejected_and_nothing_changes(self, flock):
        with pytest.raises(DomainValidationError) as exc_info:
            flock.update_composition(0, 0, 0, "Sale")

        assert exc_info.value.field == "hens"
        assert (flock.hens, flock.roosters, flock.chicks) == (10, 2, 5)
        assert len(flock.history) == 1

    @pytest.mark.parametrize("reason", ["", "   ", "r" * 51])
    def test_invalid_reason_is_rejected(self, flock, reason):
        with pytest.raises(DomainValidationError) as exc_info:
            flock.update_composition(1, 1, 1, reason)

        assert exc_info.value.field == "reason"
        assert len(flock.history) == 1

    def test_notes_longer_than_500_characters_are_rejected(self, flock):
        with pytest.raises(DomainValidationError) as exc_info:
            flock.update_composition(1, 1, 1, "Sale", "n" * 501)

        assert exc_info.value.field == "notes"

    def test_archived_flock_is_rejected(self, flock):
        flock.archive()

        with pytest.raises(DomainValidationError) as exc_info:
            flock.update_composition(9, 2, 5, "Death")

        assert exc_info.value.field == "flock_id"
        assert (flock.hens, flock.roosters, flock.chicks) == (10, 2, 5)
        assert len(flock.history) == 1

    def test_invalid_values_win_over_archived_state(self, flock):
        flock.archive()

        with pytest.raises(DomainValidationError) as exc_info:
            flock.update_composition(-1, 2, 5, "Death")

        assert exc_info.value.field == "hens"

    def test_reactivated_flock_accepts_changes(self, flock):
        flock.archive()
        flock.activate()

        flock.update_composition(9, 2, 5, "Death")

        assert len(flock.history) == 2

    def test_collect_new_history_drains_pending_entries(self, flock):
        initial = flock.collect_new_history()
        flock.update_composition(11, 2, 5, "Purchase")

        pending = flock.collect_new_history()

        assert [e.reason for e in initial] == ["Initial"]
        assert [e.reason for e in pending] == ["Purchase"]
        assert flock.collect_new_history() == []
        assert len(flock.history) == 2


class TestMatureChicks:
    """Tests for Flock.mature_chicks()."""

    def test_moves_chicks_to_adults(self, flock):
        entry = flock.mature_chicks(chicks_to_mature=4, hens=3, roosters=1)

        assert (flock.hens, flock.roosters, flock.chicks) == (13, 3, 1)
        assert entry.reason == "Maturation"
        assert len(flock.history) == 2

    def test_more_chicks_than_available_is_rejected(self, flock):
        with pytest.raises(DomainValidationError) as exc_info:
            flock.mature_chicks(chicks_to_mature=6, hens=6, roosters=0)

        assert exc_info.value.field == "chicks_to_mature"
        assert flock.chicks == 5

    def test_split_must_add_up(self, flock):
        with pytest.raises(DomainValidationError) as exc_info:
            flock.mature_chicks(chicks_to_mature=4, hens=1, roosters=1)

        assert exc_info.value.field == "chicks_to_mature"
        assert len(flock.history) == 1

    def test_zero_chicks_is_rejected(self, flock):
        with pytest.raises(DomainValidationError) as exc_info:
            flock.mature_chicks(chicks_to_mature=0, hens=0, roosters=0)

        assert exc_info.value.field == "chicks_to_mature"

    def test_archived_flock_is_rejected(self, flock):
        flock.archive()

        with pytest.raises(DomainValidationError):
            flock.mature_chicks(chicks_to_mature=1, hens=1, roosters=0)

        assert flock.chicks == 5


class TestArchive:
    def test_archive_keeps_history(self, flock):
        flock.archive()

        assert flock.is_active is False
        assert len(flock.history) == 1

        flock.activate()
        assert flock.is_active is True

    def test_total_animals(self, flock):
        assert flock.total_animals == 17

"""Tests for election lifecycle classification."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from ballot_api.lib.election_rules import (
    ElectionPhase,
    as_utc,
    classify_election,
    effective_end,
    registration_open,
)

START = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)
END = datetime(2026, 3, 5, 8, 0, tzinfo=UTC)


class TestEffectiveEnd:
    def test_moves_to_last_instant_of_day(self) -> None:
        assert effective_end(END) == datetime(2026, 3, 5, 23, 59, 59, 999999, tzinfo=UTC)

    def test_naive_treated_as_utc(self) -> None:
        assert effective_end(datetime(2026, 3, 5)) == datetime(2026, 3, 5, 23, 59, 59, 999999, tzinfo=UTC)

    def test_offset_converted_before_truncating(self) -> None:
        # 2026-03-06 01:00 at UTC+2 is still 2026-03-05 in UTC
        local = datetime(2026, 3, 6, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert effective_end(local).date() == END.date()


class TestClassifyElection:
    def test_before_start_is_upcoming(self) -> None:
        assert classify_election(START - timedelta(seconds=1), START, END) is ElectionPhase.UPCOMING

    def test_at_start_is_ongoing(self) -> None:
        assert classify_election(START, START, END) is ElectionPhase.ONGOING

    def test_after_nominal_end_same_day_is_ongoing(self) -> None:
        assert classify_election(datetime(2026, 3, 5, 23, 0, tzinfo=UTC), START, END) is ElectionPhase.ONGOING

    def test_last_instant_of_end_day_is_ongoing(self) -> None:
        assert classify_election(effective_end(END), START, END) is ElectionPhase.ONGOING

    def test_day_after_end_is_concluded(self) -> None:
        assert classify_election(datetime(2026, 3, 6, tzinfo=UTC), START, END) is ElectionPhase.CONCLUDED

    def test_naive_inputs_accepted(self) -> None:
        naive_start = START.replace(tzinfo=None)
        naive_end = END.replace(tzinfo=None)
        assert classify_election(datetime(2026, 3, 2), naive_start, naive_end) is ElectionPhase.ONGOING

    @pytest.mark.parametrize("hours", range(0, 24 * 8, 7))
    def test_exactly_one_phase(self, hours: int) -> None:
        now = START - timedelta(days=1) + timedelta(hours=hours)
        assert classify_election(now, START, END) in set(ElectionPhase)

    def test_phase_values(self) -> None:
        assert [p.value for p in ElectionPhase] == ["upcoming", "ongoing", "concluded"]


class TestRegistrationOpen:
    @pytest.mark.parametrize(
        ("phase", "expected"),
        [
            (ElectionPhase.UPCOMING, True),
            (ElectionPhase.ONGOING, True),
            (ElectionPhase.CONCLUDED, False),
        ],
    )
    def test_until_concluded(self, phase: ElectionPhase, expected: bool) -> None:
        assert registration_open(phase) is expected

    @pytest.mark.parametrize(
        ("phase", "expected"),
        [
            (ElectionPhase.UPCOMING, True),
            (ElectionPhase.ONGOING, False),
            (ElectionPhase.CONCLUDED, False),
        ],
    )
    def test_upcoming_only(self, phase: ElectionPhase, expected: bool) -> None:
        assert registration_open(phase, "upcoming_only") is expected


def test_as_utc_converts_offset() -> None:
    value = datetime(2026, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert as_utc(value) == datetime(2026, 1, 1, 17, 0, tzinfo=UTC)
    assert as_utc(value).tzinfo is UTC

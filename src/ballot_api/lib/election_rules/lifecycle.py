"""Election lifecycle classification.

An election is *upcoming* before its start, *ongoing* between start and the
effective end, and *concluded* afterwards.  The effective end is the last
instant of the end date's calendar day in UTC, so an election "ending" on a
given date stays open for voting through all of that day.
"""

import enum
from datetime import UTC, datetime, time
from typing import Literal

RegistrationWindow = Literal["until_concluded", "upcoming_only"]

_END_OF_DAY = time(23, 59, 59, 999999)


class ElectionPhase(enum.StrEnum):
    """Lifecycle phase of an election relative to a point in time."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    CONCLUDED = "concluded"


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes (SQLite drops tzinfo) are taken to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def effective_end(end_date: datetime) -> datetime:
    """Normalize an end date to 23:59:59.999999 UTC of the same day."""
    end = as_utc(end_date)
    return datetime.combine(end.date(), _END_OF_DAY, tzinfo=UTC)


def classify_election(now: datetime, start_date: datetime, end_date: datetime) -> ElectionPhase:
    """Classify an election's phase at ``now``.

    Args:
        now: The reference instant.
        start_date: Election start.
        end_date: Election end (normalized with :func:`effective_end`).

    Returns:
        Exactly one of the three phases.
    """
    current = as_utc(now)
    if current < as_utc(start_date):
        return ElectionPhase.UPCOMING
    if current > effective_end(end_date):
        return ElectionPhase.CONCLUDED
    return ElectionPhase.ONGOING


def registration_open(phase: ElectionPhase, window: RegistrationWindow = "until_concluded") -> bool:
    """Whether candidate registration is accepted in ``phase``."""
    if window == "upcoming_only":
        return phase is ElectionPhase.UPCOMING
    return phase is not ElectionPhase.CONCLUDED

"""Result tallying."""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class TallyEntry:
    """One candidate's standing in an election."""

    candidate_id: str
    candidate_name: str
    party: str
    vote_count: int


def rank_tally(entries: Iterable[TallyEntry]) -> list[TallyEntry]:
    """Sort entries by vote count, highest first.

    ``entries`` must already be in ballot order; ties keep that order
    because ``sorted`` is stable.
    """
    return sorted(entries, key=lambda entry: entry.vote_count, reverse=True)


def total_votes(entries: Iterable[TallyEntry]) -> int:
    """Sum of all vote counts."""
    return sum(entry.vote_count for entry in entries)

"""Election rules library: pure business rules with no I/O.

Public API:
    - ElectionPhase: upcoming / ongoing / concluded
    - classify_election: Map (now, start, end) to an ElectionPhase
    - effective_end: End-of-day normalization applied to every end date
    - registration_open: Whether candidate registration is accepted
    - voting_block_reason: Eligibility rule for casting a ballot
    - TallyEntry, rank_tally: Stable descending result ordering
"""

from ballot_api.lib.election_rules.eligibility import (
    NOT_ELIGIBLE_MESSAGE,
    NOT_REGISTERED_MESSAGE,
    NOT_VERIFIED_MESSAGE,
    voting_block_reason,
)
from ballot_api.lib.election_rules.lifecycle import (
    ElectionPhase,
    RegistrationWindow,
    as_utc,
    classify_election,
    effective_end,
    registration_open,
)
from ballot_api.lib.election_rules.tally import TallyEntry, rank_tally, total_votes

__all__ = [
    "NOT_ELIGIBLE_MESSAGE",
    "NOT_REGISTERED_MESSAGE",
    "NOT_VERIFIED_MESSAGE",
    "ElectionPhase",
    "RegistrationWindow",
    "TallyEntry",
    "as_utc",
    "classify_election",
    "effective_end",
    "rank_tally",
    "registration_open",
    "total_votes",
    "voting_block_reason",
]

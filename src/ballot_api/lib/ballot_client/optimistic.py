"""Optimistic local vote with compensation on failure.

A vote is shown immediately: the chosen candidate's local count goes up by
one and a "voted" marker is set. If the server does not accept the vote the
increment and the marker are undone and the server's error is re-raised.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from ballot_api.lib.ballot_client.client import BallotClient, BallotClientError

ALREADY_VOTED_MESSAGE = "You have already voted in this election."


class OptimisticBallot:
    """Local view of one election's counters for a single voter.

    Args:
        client: The API client used to submit the vote.
        election_id: The election being voted in.
        counts: Initial per-candidate counts, keyed by candidate id.
    """

    def __init__(self, client: BallotClient, election_id: str, counts: Mapping[str, int] | None = None) -> None:
        self._client = client
        self.election_id = election_id
        self._counts: dict[str, int] = dict(counts or {})
        self._voted_for: str | None = None

    @classmethod
    async def load(cls, client: BallotClient, election_id: str) -> "OptimisticBallot":
        """Create a ballot seeded with the election's current counters."""
        results = await client.get_results(election_id)
        ballot = cls(client, election_id)
        ballot.apply_results(results)
        return ballot

    @property
    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    @property
    def voted_for(self) -> str | None:
        return self._voted_for

    def apply_results(self, results: Mapping[str, Any]) -> None:
        """Replace local counts with a server results payload."""
        self._counts = {entry["candidate_id"]: entry["vote_count"] for entry in results.get("results", [])}

    async def vote(self, candidate_id: str) -> dict[str, Any]:
        """Apply the vote locally, then submit it.

        Returns:
            The server's acknowledgement.

        Raises:
            BallotClientError: If a vote is already marked locally, or the
                server rejected the vote or could not be reached. In the
                latter cases local state is restored first.
        """
        if self._voted_for is not None:
            raise BallotClientError(ALREADY_VOTED_MESSAGE, code="already_voted")

        had_entry = candidate_id in self._counts
        self._counts[candidate_id] = self._counts.get(candidate_id, 0) + 1
        self._voted_for = candidate_id
        try:
            return await self._client.cast_vote(self.election_id, candidate_id)
        except BaseException:
            self._compensate(candidate_id, had_entry=had_entry)
            raise

    def _compensate(self, candidate_id: str, *, had_entry: bool) -> None:
        if had_entry:
            self._counts[candidate_id] = max(self._counts.get(candidate_id, 0) - 1, 0)
        else:
            self._counts.pop(candidate_id, None)
        self._voted_for = None
        logger.debug("Rolled back optimistic vote for {} in election {}", candidate_id, self.election_id)

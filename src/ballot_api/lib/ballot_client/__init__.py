"""Ballot client library: HTTP client and optimistic voting for the Ballot API.

Public API:
    - BallotClient: Async client for elections, registration, voting and results
    - BallotClientError: Raised for rejected requests and transport failures
    - OptimisticBallot: Local tentative vote with compensation on failure
"""

from ballot_api.lib.ballot_client.client import DEFAULT_POLL_INTERVAL, BallotClient, BallotClientError
from ballot_api.lib.ballot_client.optimistic import ALREADY_VOTED_MESSAGE, OptimisticBallot

__all__ = [
    "ALREADY_VOTED_MESSAGE",
    "DEFAULT_POLL_INTERVAL",
    "BallotClient",
    "BallotClientError",
    "OptimisticBallot",
]

"""Unit tests for the Ballot API HTTP client."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from ballot_api.lib.ballot_client import BallotClient, BallotClientError

BASE = "http://ballot.test/api/v1"
ELECTION_ID = "0b5f1e52-7c8a-4a54-9a0c-2f8d6b1f4a11"


def _results(*counts: tuple[str, int]) -> dict:
    return {
        "election_id": ELECTION_ID,
        "election_name": "Council",
        "phase": "ongoing",
        "results": [
            {"candidate_id": cid, "candidate_name": cid, "party": "P", "vote_count": n} for cid, n in counts
        ],
        "total_votes": sum(n for _, n in counts),
    }


class _Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)


def _client(handler: _Recorder, token: str | None = "tok") -> BallotClient:
    return BallotClient(BASE, token=token, transport=httpx.MockTransport(handler))


class TestBallotClientRequests:
    async def test_bearer_token_sent(self) -> None:
        handler = _Recorder(httpx.Response(200, json={"items": [], "pagination": {}}))
        async with _client(handler) as client:
            await client.list_elections()
        assert handler.requests[0].headers["Authorization"] == "Bearer tok"

    async def test_no_token_no_header(self) -> None:
        handler = _Recorder(httpx.Response(200, json={"items": [], "pagination": {}}))
        async with _client(handler, token=None) as client:
            await client.list_elections()
        assert "Authorization" not in handler.requests[0].headers

    async def test_list_elections_phase_param(self) -> None:
        handler = _Recorder(httpx.Response(200, json={"items": [], "pagination": {}}))
        async with _client(handler) as client:
            await client.list_elections(phase="ongoing", page=2, page_size=5)
        url = handler.requests[0].url
        assert url.path == "/api/v1/elections"
        assert url.params["phase"] == "ongoing"
        assert url.params["page"] == "2"
        assert url.params["page_size"] == "5"

    async def test_cast_vote_payload(self) -> None:
        handler = _Recorder(httpx.Response(200, json={"message": "Vote recorded successfully!"}))
        async with _client(handler) as client:
            result = await client.cast_vote(ELECTION_ID, "cand-1")
        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path == f"/api/v1/elections/{ELECTION_ID}/vote"
        assert json.loads(request.content) == {"candidate_id": "cand-1"}
        assert result["message"] == "Vote recorded successfully!"

    async def test_register_candidate_payload(self) -> None:
        handler = _Recorder(httpx.Response(201, json={"message": "ok", "candidate": {}}))
        async with _client(handler) as client:
            await client.register_candidate(
                ELECTION_ID, name="Dana", party="Green", platform="Clean water for all."
            )
        assert json.loads(handler.requests[0].content) == {
            "name": "Dana",
            "party": "Green",
            "platform": "Clean water for all.",
            "image_url": "",
        }

    async def test_login_sets_authorization(self) -> None:
        handler = _Recorder(
            httpx.Response(200, json={"access_token": "new-token", "refresh_token": "r", "expires_in": 1800}),
            httpx.Response(200, json=_results()),
        )
        async with _client(handler, token=None) as client:
            token = await client.login("alice", "secret-password")
            await client.get_results(ELECTION_ID)
        assert token == "new-token"
        assert handler.requests[0].headers["content-type"] == "application/x-www-form-urlencoded"
        assert handler.requests[1].headers["Authorization"] == "Bearer new-token"


class TestBallotClientErrors:
    async def test_server_message_and_code(self) -> None:
        body = {"message": "You have already voted in this election.", "code": "already_voted", "errors": None}
        handler = _Recorder(httpx.Response(409, json=body))
        async with _client(handler) as client:
            with pytest.raises(BallotClientError) as exc_info:
                await client.cast_vote(ELECTION_ID, "cand-1")
        assert exc_info.value.message == "You have already voted in this election."
        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "already_voted"

    async def test_non_json_error_uses_status(self) -> None:
        handler = _Recorder(httpx.Response(502, text="Bad Gateway"))
        async with _client(handler) as client:
            with pytest.raises(BallotClientError, match="HTTP 502: Bad Gateway") as exc_info:
                await client.get_election(ELECTION_ID)
        assert exc_info.value.code is None

    async def test_transport_failure(self) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with BallotClient(BASE, transport=httpx.MockTransport(_refuse)) as client:
            with pytest.raises(BallotClientError, match="Request failed") as exc_info:
                await client.get_results(ELECTION_ID)
        assert exc_info.value.status_code is None

    async def test_non_object_success_body(self) -> None:
        handler = _Recorder(httpx.Response(200, json=[1, 2, 3]))
        async with _client(handler) as client:
            with pytest.raises(BallotClientError, match="Invalid JSON"):
                await client.get_results(ELECTION_ID)


class TestWatchResults:
    async def test_polls_until_max_and_sleeps_between(self) -> None:
        handler = _Recorder(
            httpx.Response(200, json=_results(("a", 0))),
            httpx.Response(200, json=_results(("a", 1))),
            httpx.Response(200, json=_results(("a", 2))),
        )
        with patch("ballot_api.lib.ballot_client.client.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            async with _client(handler) as client:
                seen = [r["total_votes"] async for r in client.watch_results(ELECTION_ID, interval=3.0, max_polls=3)]

        assert seen == [0, 1, 2]
        assert mock_sleep.await_count == 2
        mock_sleep.assert_awaited_with(3.0)

    async def test_error_stops_iteration(self) -> None:
        handler = _Recorder(
            httpx.Response(200, json=_results(("a", 0))),
            httpx.Response(404, json={"message": "Election not found.", "code": "election_not_found"}),
        )
        seen = []
        with patch("ballot_api.lib.ballot_client.client.asyncio.sleep", new_callable=AsyncMock):
            async with _client(handler) as client:
                with pytest.raises(BallotClientError, match="Election not found."):
                    async for result in client.watch_results(ELECTION_ID, max_polls=5):
                        seen.append(result)
        assert len(seen) == 1

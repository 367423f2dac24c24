"""Async HTTP client for the Ballot API."""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
from loguru import logger

DEFAULT_POLL_INTERVAL = 10.0


class BallotClientError(Exception):
    """Raised for any non-success response or transport failure.

    Args:
        message: The server's ``message`` when one was returned, else a
            transport description.
        status_code: HTTP status of the failed response, if any.
        code: The server's machine-readable error code, if any.
    """

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class BallotClient:
    """Client for the election, registration, voting and results endpoints.

    Args:
        base_url: API root including the version prefix (e.g. "http://localhost:8000/api/v1").
        token: Optional bearer access token.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used to target an in-process app).
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "BallotClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def login(self, username: str, password: str) -> str:
        """Obtain an access token and use it for subsequent requests."""
        data = await self._request("POST", "/auth/login", data={"username": username, "password": password})
        token: str = data["access_token"]
        self._client.headers["Authorization"] = f"Bearer {token}"
        return token

    async def list_elections(self, phase: str | None = None, page: int = 1, page_size: int = 20) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "page_size": page_size}
        if phase is not None:
            params["phase"] = phase
        return await self._request("GET", "/elections", params=params)

    async def get_election(self, election_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/elections/{election_id}")

    async def get_results(self, election_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/elections/{election_id}/results")

    async def register_candidate(
        self,
        election_id: str,
        *,
        name: str,
        party: str,
        platform: str,
        image_url: str | None = None,
    ) -> dict[str, Any]:
        payload = {"name": name, "party": party, "platform": platform, "image_url": image_url or ""}
        return await self._request("POST", f"/elections/{election_id}/register", json=payload)

    async def cast_vote(self, election_id: str, candidate_id: str) -> dict[str, Any]:
        return await self._request("POST", f"/elections/{election_id}/vote", json={"candidate_id": candidate_id})

    async def watch_results(
        self,
        election_id: str,
        interval: float = DEFAULT_POLL_INTERVAL,
        max_polls: int | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield fresh results every ``interval`` seconds.

        Args:
            election_id: The election to watch.
            interval: Seconds between polls.
            max_polls: Stop after this many polls; None polls until cancelled.
        """
        polls = 0
        while max_polls is None or polls < max_polls:
            yield await self.get_results(election_id)
            polls += 1
            if max_polls is None or polls < max_polls:
                await asyncio.sleep(interval)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.error("Ballot API request failed: {} {}: {}", method, path, exc)
            raise BallotClientError(f"Request failed: {exc}") from exc

        try:
            body: Any = response.json()
        except json.JSONDecodeError:
            body = None

        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            code = body.get("code") if isinstance(body, dict) else None
            logger.warning("Ballot API {} {} returned {}: {}", method, path, response.status_code, message)
            raise BallotClientError(
                message or f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                code=code,
            )
        if not isinstance(body, dict):
            msg = f"Invalid JSON response for {path}"
            raise BallotClientError(msg, status_code=response.status_code)
        return body

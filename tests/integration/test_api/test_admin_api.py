"""Integration tests for voter and candidate-account administration endpoints."""

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.models.audit_log import AuditLog

PREFIX = "/api/v1"


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestVoterAdministration:
    async def test_list_voters_with_filter(self, client: AsyncClient, make_user, token_for) -> None:
        admin = await make_user("admin")
        await make_user("voter", is_verified=True)
        await make_user("voter", is_verified=False)

        resp = await client.get(f"{PREFIX}/voters", params={"is_verified": "false"}, headers=_auth(token_for(admin)))
        assert resp.status_code == 200
        body = resp.json()
        assert body["pagination"]["total"] == 1
        assert body["items"][0]["is_verified"] is False

    async def test_verify_writes_audit_log(
        self, client: AsyncClient, async_session: AsyncSession, make_user, token_for
    ) -> None:
        admin = await make_user("admin")
        voter = await make_user("voter", is_verified=False)

        resp = await client.post(
            f"{PREFIX}/voters/{voter.id}/verify", json={"is_verified": False}, headers=_auth(token_for(admin))
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "Voter verification status updated successfully to false."

        logs = (await async_session.execute(select(AuditLog))).scalars().all()
        assert len(logs) == 1
        assert logs[0].action == "verify"
        assert logs[0].resource_ids == [str(voter.id)]
        assert logs[0].request_metadata == {"is_verified": False}

    async def test_unknown_voter_404(self, client: AsyncClient, make_user, token_for) -> None:
        admin = await make_user("admin")
        resp = await client.post(
            f"{PREFIX}/voters/missing/eligible", json={"is_eligible": True}, headers=_auth(token_for(admin))
        )
        assert resp.status_code == 404
        assert resp.json()["message"] == "Voter not found."

    async def test_missing_flag_400(self, client: AsyncClient, make_user, token_for) -> None:
        admin = await make_user("admin")
        voter = await make_user("voter")
        resp = await client.post(f"{PREFIX}/voters/{voter.id}/verify", json={}, headers=_auth(token_for(admin)))
        assert resp.status_code == 400
        assert "is_verified" in resp.json()["errors"]

    async def test_non_admin_forbidden(self, client: AsyncClient, make_user, token_for) -> None:
        voter = await make_user("voter", is_verified=False)
        resp = await client.post(
            f"{PREFIX}/voters/{voter.id}/verify", json={"is_verified": True}, headers=_auth(token_for(voter))
        )
        assert resp.status_code == 403


class TestCandidateAdministration:
    async def test_list_pending(self, client: AsyncClient, make_user, token_for) -> None:
        admin = await make_user("admin")
        pending = await make_user("candidate", is_approved=False)
        await make_user("candidate", is_approved=True)

        resp = await client.get(
            f"{PREFIX}/candidates", params={"is_approved": "false"}, headers=_auth(token_for(admin))
        )
        items = resp.json()["items"]
        assert [i["id"] for i in items] == [str(pending.id)]

    async def test_revoke(self, client: AsyncClient, make_user, token_for) -> None:
        admin = await make_user("admin")
        candidate = await make_user("candidate", is_approved=True)
        resp = await client.post(f"{PREFIX}/candidates/{candidate.id}/revoke", headers=_auth(token_for(admin)))
        assert resp.status_code == 200
        assert resp.json()["message"] == f"Candidate {candidate.id} approval revoked successfully."

    async def test_unknown_candidate_404(self, client: AsyncClient, make_user, token_for) -> None:
        admin = await make_user("admin")
        resp = await client.post(f"{PREFIX}/candidates/missing/approve", headers=_auth(token_for(admin)))
        assert resp.status_code == 404
        assert resp.json()["code"] == "candidate_account_not_found"

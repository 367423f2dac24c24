"""Tests for the audit logging service."""

from unittest.mock import MagicMock

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.models.audit_log import AuditLog
from ballot_api.services.audit_service import log_access, log_admin_action


class TestLogAccess:
    async def test_persists_record(self, async_session: AsyncSession, sample_user) -> None:
        entry = await log_access(
            async_session,
            user_id=sample_user.id,
            username=sample_user.username,
            action="approve",
            resource_type="candidate_account",
            resource_ids=["sub-1"],
        )
        stored = (await async_session.execute(select(AuditLog).where(AuditLog.id == entry.id))).scalar_one()
        assert stored.action == "approve"
        assert stored.resource_ids == ["sub-1"]
        assert stored.request_metadata is None


class TestLogAdminAction:
    async def test_captures_request_context(self, async_session: AsyncSession, sample_user) -> None:
        request = MagicMock()
        request.client.host = "203.0.113.9"
        request.url.path = "/api/v1/voters/sub-2/verify"

        entry = await log_admin_action(
            async_session,
            request,
            sample_user,
            action="verify",
            resource_type="voter",
            resource_id="sub-2",
            metadata={"is_verified": True},
        )

        assert entry.username == "testadmin"
        assert entry.request_ip == "203.0.113.9"
        assert entry.request_endpoint == "/api/v1/voters/sub-2/verify"
        assert entry.request_metadata == {"is_verified": True}

    async def test_missing_client(self, async_session: AsyncSession, sample_user) -> None:
        request = MagicMock()
        request.client = None
        request.url.path = "/api/v1/elections"
        entry = await log_admin_action(
            async_session, request, sample_user, action="create", resource_type="election", resource_id="e-1"
        )
        assert entry.request_ip is None

    async def test_emits_json_audit_line(self, async_session: AsyncSession, sample_user) -> None:
        request = MagicMock()
        request.client = None
        request.url.path = "/api/v1/candidates/c-1/approve"
        messages: list = []
        sink_id = logger.add(messages.append, filter=lambda record: record["extra"].get("json_output", False))
        try:
            await log_admin_action(
                async_session, request, sample_user, action="approve", resource_type="candidate", resource_id="c-1"
            )
        finally:
            logger.remove(sink_id)

        assert len(messages) == 1
        extra = messages[0].record["extra"]
        assert (extra["action"], extra["resource_type"], extra["resource_id"]) == ("approve", "candidate", "c-1")

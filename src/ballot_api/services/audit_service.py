"""Audit logging service.

Provides an immutable audit trail of administrative mutations: election
creation and deletion, candidate approval, voter verification and
eligibility changes.
"""

import uuid

from fastapi import Request
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.models.audit_log import AuditLog
from ballot_api.models.user import User


async def log_access(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    username: str,
    action: str,
    resource_type: str,
    resource_ids: list[str] | None = None,
    request_ip: str | None = None,
    request_endpoint: str | None = None,
    request_metadata: dict | None = None,
) -> AuditLog:
    """Create an immutable audit log record.

    Args:
        session: The database session.
        user_id: The acting user's ID.
        username: The acting user's username.
        action: The action performed (create, delete, approve, revoke, verify, eligible).
        resource_type: The resource type affected.
        resource_ids: List of affected resource IDs.
        request_ip: The request IP address.
        request_endpoint: The API endpoint called.
        request_metadata: Additional context metadata.

    Returns:
        The created AuditLog record.
    """
    audit_log = AuditLog(
        user_id=user_id,
        username=username,
        action=action,
        resource_type=resource_type,
        resource_ids=resource_ids,
        request_ip=request_ip,
        request_endpoint=request_endpoint,
        request_metadata=request_metadata,
    )
    session.add(audit_log)
    await session.commit()
    return audit_log


async def log_admin_action(
    session: AsyncSession,
    request: Request,
    user: User,
    *,
    action: str,
    resource_type: str,
    resource_id: str,
    metadata: dict | None = None,
) -> AuditLog:
    """Audit an admin mutation made through the API, as a row and a JSON log line."""
    entry = await log_access(
        session,
        user_id=user.id,
        username=user.username,
        action=action,
        resource_type=resource_type,
        resource_ids=[resource_id],
        request_ip=request.client.host if request.client else None,
        request_endpoint=request.url.path,
        request_metadata=metadata,
    )
    logger.bind(json_output=True, action=action, resource_type=resource_type, resource_id=resource_id).info(
        "Admin {} performed {}", user.username, action
    )
    return entry

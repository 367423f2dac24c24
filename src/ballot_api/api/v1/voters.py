"""Voter administration endpoints (admin only).

GET /voters: list voter records
POST /voters/{id}/verify: set the verification flag
POST /voters/{id}/eligible: set the eligibility flag
"""

import math
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.dependencies import get_async_session, require_role
from ballot_api.models.user import User
from ballot_api.schemas.common import MessageResponse, PaginationMeta
from ballot_api.schemas.voter import (
    PaginatedVoterResponse,
    VoterEligibleRequest,
    VoterResponse,
    VoterVerifyRequest,
)
from ballot_api.services import audit_service, voter_service

voters_router = APIRouter(prefix="/voters", tags=["voters"])


@voters_router.get("", response_model=PaginatedVoterResponse)
async def list_voters(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _current_user: Annotated[User, Depends(require_role("admin"))],
    is_verified: bool | None = Query(default=None, description="Filter by verification flag"),
    is_eligible: bool | None = Query(default=None, description="Filter by eligibility flag"),
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=20, ge=1, le=100, description="Results per page"),
) -> PaginatedVoterResponse:
    """List voter records with their approval flags."""
    voters, total = await voter_service.list_voters(
        session,
        is_verified=is_verified,
        is_eligible=is_eligible,
        page=page,
        page_size=page_size,
    )
    return PaginatedVoterResponse(
        items=[VoterResponse.model_validate(v) for v in voters],
        pagination=PaginationMeta(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=max(1, math.ceil(total / page_size)) if total > 0 else 0,
        ),
    )


@voters_router.post("/{voter_id}/verify", response_model=MessageResponse)
async def set_voter_verified(
    voter_id: str,
    body: VoterVerifyRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> MessageResponse:
    """Set or clear a voter's verification flag."""
    await voter_service.set_verified(session, voter_id, body.is_verified)
    await audit_service.log_admin_action(
        session,
        request,
        current_user,
        action="verify",
        resource_type="voter",
        resource_id=voter_id,
        metadata={"is_verified": body.is_verified},
    )
    return MessageResponse(
        message=f"Voter verification status updated successfully to {str(body.is_verified).lower()}."
    )


@voters_router.post("/{voter_id}/eligible", response_model=MessageResponse)
async def set_voter_eligible(
    voter_id: str,
    body: VoterEligibleRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> MessageResponse:
    """Set or clear a voter's eligibility flag."""
    await voter_service.set_eligible(session, voter_id, body.is_eligible)
    await audit_service.log_admin_action(
        session,
        request,
        current_user,
        action="eligible",
        resource_type="voter",
        resource_id=voter_id,
        metadata={"is_eligible": body.is_eligible},
    )
    return MessageResponse(
        message=f"Voter eligibility status updated successfully to {str(body.is_eligible).lower()}."
    )

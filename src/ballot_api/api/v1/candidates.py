"""Candidate account administration endpoints (admin only).

GET /candidates: list candidate accounts
POST /candidates/{id}/approve: approve a candidate account
POST /candidates/{id}/revoke: revoke a candidate account's approval
"""

import math
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.dependencies import get_async_session, require_role
from ballot_api.models.user import User
from ballot_api.schemas.candidate_account import CandidateAccountResponse, PaginatedCandidateAccountResponse
from ballot_api.schemas.common import MessageResponse, PaginationMeta
from ballot_api.services import audit_service, candidate_account_service

candidates_router = APIRouter(prefix="/candidates", tags=["candidates"])


@candidates_router.get("", response_model=PaginatedCandidateAccountResponse)
async def list_candidate_accounts(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _current_user: Annotated[User, Depends(require_role("admin"))],
    is_approved: bool | None = Query(default=None, description="Filter by approval flag"),
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=20, ge=1, le=100, description="Results per page"),
) -> PaginatedCandidateAccountResponse:
    """List candidate accounts with their approval flags."""
    accounts, total = await candidate_account_service.list_candidate_accounts(
        session,
        is_approved=is_approved,
        page=page,
        page_size=page_size,
    )
    return PaginatedCandidateAccountResponse(
        items=[CandidateAccountResponse.model_validate(a) for a in accounts],
        pagination=PaginationMeta(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=max(1, math.ceil(total / page_size)) if total > 0 else 0,
        ),
    )


async def _set_approval(
    session: AsyncSession,
    request: Request,
    current_user: User,
    candidate_id: str,
    is_approved: bool,
) -> None:
    await candidate_account_service.set_approval(session, candidate_id, is_approved)
    await audit_service.log_admin_action(
        session,
        request,
        current_user,
        action="approve" if is_approved else "revoke",
        resource_type="candidate_account",
        resource_id=candidate_id,
    )


@candidates_router.post("/{candidate_id}/approve", response_model=MessageResponse)
async def approve_candidate(
    candidate_id: str,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> MessageResponse:
    """Approve a candidate account."""
    await _set_approval(session, request, current_user, candidate_id, True)
    return MessageResponse(message=f"Candidate {candidate_id} approved successfully.")


@candidates_router.post("/{candidate_id}/revoke", response_model=MessageResponse)
async def revoke_candidate(
    candidate_id: str,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> MessageResponse:
    """Revoke a candidate account's approval."""
    await _set_approval(session, request, current_user, candidate_id, False)
    return MessageResponse(message=f"Candidate {candidate_id} approval revoked successfully.")

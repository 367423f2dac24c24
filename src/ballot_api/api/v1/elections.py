"""Election API endpoints.

GET /elections: list elections, optionally by phase
POST /elections: create election (admin)
GET /elections/{id}: election detail with candidates
DELETE /elections/{id}: delete election (admin)
POST /elections/{id}/register: register a candidate
POST /elections/{id}/vote: cast a vote
GET /elections/{id}/results: current tally
"""

import math
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings, get_settings
from ballot_api.core.dependencies import get_async_session, get_current_user, require_role
from ballot_api.lib.election_rules import ElectionPhase
from ballot_api.models.user import User
from ballot_api.schemas.common import MessageResponse, PaginationMeta
from ballot_api.schemas.election import (
    CandidateCreateRequest,
    CandidateRegistrationResponse,
    CandidateResponse,
    ElectionCreateRequest,
    ElectionCreateResponse,
    ElectionDetailResponse,
    ElectionResultsResponse,
    PaginatedElectionListResponse,
    VoteRequest,
    VoteResponse,
)
from ballot_api.services import audit_service, election_service
from ballot_api.services.errors import ElectionNotFoundError

elections_router = APIRouter(prefix="/elections", tags=["elections"])


@elections_router.get("", response_model=PaginatedElectionListResponse)
async def list_elections(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    phase: ElectionPhase | None = Query(default=None, description="Filter by lifecycle phase"),
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=20, ge=1, le=100, description="Results per page"),
) -> PaginatedElectionListResponse:
    """List elections, newest start date first. Public endpoint."""
    items, total = await election_service.list_elections(session, phase=phase, page=page, page_size=page_size)
    return PaginatedElectionListResponse(
        items=items,
        pagination=PaginationMeta(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=max(1, math.ceil(total / page_size)) if total > 0 else 0,
        ),
    )


@elections_router.post("", response_model=ElectionCreateResponse, status_code=201)
async def create_election(
    body: ElectionCreateRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> ElectionCreateResponse:
    """Create an election with its initial candidates. Admin-only."""
    election = await election_service.create_election(session, body, created_by=str(current_user.id))
    await audit_service.log_admin_action(
        session,
        request,
        current_user,
        action="create",
        resource_type="election",
        resource_id=str(election.id),
    )
    return ElectionCreateResponse(message="Election created successfully!", id=election.id)


@elections_router.get("/{election_id}", response_model=ElectionDetailResponse)
async def get_election(
    election_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ElectionDetailResponse:
    """Get election detail by ID. Public endpoint."""
    election = await election_service.get_election_by_id(session, election_id)
    if election is None:
        raise ElectionNotFoundError
    return election_service.build_detail_response(election)


@elections_router.delete("/{election_id}", response_model=MessageResponse)
async def delete_election(
    election_id: uuid.UUID,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> MessageResponse:
    """Delete an election, its candidates and its vote ledger. Admin-only."""
    await election_service.delete_election(session, election_id)
    await audit_service.log_admin_action(
        session,
        request,
        current_user,
        action="delete",
        resource_type="election",
        resource_id=str(election_id),
    )
    return MessageResponse(message="Election deleted successfully.")


@elections_router.post("/{election_id}/register", response_model=CandidateRegistrationResponse, status_code=201)
async def register_candidate(
    election_id: uuid.UUID,
    body: CandidateCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> CandidateRegistrationResponse:
    """Register a candidate while registration is open. Admins and approved candidates only."""
    candidate = await election_service.register_candidate(
        session,
        election_id,
        body,
        user=current_user,
        window=settings.candidate_registration_window,
    )
    return CandidateRegistrationResponse(
        message="Candidate registered successfully!",
        candidate=CandidateResponse.model_validate(candidate),
    )


@elections_router.post("/{election_id}/vote", response_model=VoteResponse)
async def cast_vote(
    election_id: uuid.UUID,
    body: VoteRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> VoteResponse:
    """Record the caller's vote for one candidate of an ongoing election."""
    await election_service.record_vote(session, election_id, body.candidate_id, current_user)
    return VoteResponse(message="Vote recorded successfully!")


@elections_router.get("/{election_id}/results", response_model=ElectionResultsResponse)
async def get_election_results(
    election_id: uuid.UUID,
    response: Response,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ElectionResultsResponse:
    """Get the current tally, highest count first. Public endpoint."""
    result = await election_service.get_results(session, election_id)
    response.headers["Cache-Control"] = "no-store"
    return result

"""Pydantic v2 schemas for election, registration, voting and results endpoints."""

import uuid
from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from ballot_api.lib.election_rules import ElectionPhase, as_utc
from ballot_api.schemas.common import ImageUrl, PaginationMeta

# --- Request schemas ---


class CandidateCreateRequest(BaseModel):
    """A candidate as submitted at election creation or registration."""

    name: str = Field(min_length=2, max_length=200)
    party: str = Field(min_length=2, max_length=200)
    platform: str = Field(min_length=10)
    image_url: ImageUrl = None


class ElectionCreateRequest(BaseModel):
    """Request body for creating a new election."""

    name: str = Field(min_length=5, max_length=500)
    description: str = Field(min_length=10)
    start_date: datetime
    end_date: datetime
    candidates: list[CandidateCreateRequest] = Field(min_length=1)

    @model_validator(mode="after")
    def end_after_start(self) -> Self:
        if as_utc(self.end_date) <= as_utc(self.start_date):
            msg = "End date must be after start date."
            raise ValueError(msg)
        return self


class VoteRequest(BaseModel):
    """Request body for casting a vote."""

    candidate_id: str = Field(min_length=1, max_length=36)


# --- Response schemas ---


class CandidateResponse(BaseModel):
    """A candidate on an election's ballot."""

    model_config = {"from_attributes": True}

    id: str
    election_id: uuid.UUID
    name: str
    party: str
    platform: str
    image_url: str | None = None
    ballot_order: int
    vote_count: int = 0


class ElectionSummary(BaseModel):
    """Election summary for list endpoints."""

    id: uuid.UUID
    name: str
    description: str
    start_date: datetime
    end_date: datetime
    phase: ElectionPhase
    candidate_count: int


class ElectionDetailResponse(BaseModel):
    """Full election detail including its candidates."""

    id: uuid.UUID
    name: str
    description: str
    start_date: datetime
    end_date: datetime
    phase: ElectionPhase
    created_by: str | None = None
    candidates: list[CandidateResponse]
    created_at: datetime
    updated_at: datetime


class ElectionCreateResponse(BaseModel):
    """Acknowledgement returned after creating an election."""

    message: str
    id: uuid.UUID


class PaginatedElectionListResponse(BaseModel):
    """Paginated list of elections."""

    items: list[ElectionSummary]
    pagination: PaginationMeta


class CandidateRegistrationResponse(BaseModel):
    """Acknowledgement returned after registering a candidate."""

    message: str
    candidate: CandidateResponse


class VoteResponse(BaseModel):
    """Acknowledgement returned after a vote is recorded."""

    message: str


class CandidateTally(BaseModel):
    """One candidate's vote count in a results listing."""

    candidate_id: str
    candidate_name: str
    party: str
    vote_count: int


class ElectionResultsResponse(BaseModel):
    """Election results sorted by vote count, highest first."""

    election_id: uuid.UUID
    election_name: str
    phase: ElectionPhase
    results: list[CandidateTally]
    total_votes: int

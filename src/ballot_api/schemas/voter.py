"""Voter Pydantic v2 request/response schemas."""

from datetime import datetime

from pydantic import BaseModel

from ballot_api.schemas.common import PaginationMeta


class VoterResponse(BaseModel):
    """A voter record as seen by administrators."""

    model_config = {"from_attributes": True}

    id: str
    email: str
    is_eligible: bool
    is_verified: bool
    registered_at: datetime


class PaginatedVoterResponse(BaseModel):
    """Paginated list of voter records."""

    items: list[VoterResponse]
    pagination: PaginationMeta


class VoterVerifyRequest(BaseModel):
    """Set a voter's verification flag."""

    is_verified: bool


class VoterEligibleRequest(BaseModel):
    """Set a voter's eligibility flag."""

    is_eligible: bool

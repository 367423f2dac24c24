"""Candidate account Pydantic v2 response schemas."""

from datetime import date, datetime

from pydantic import BaseModel

from ballot_api.schemas.common import PaginationMeta


class CandidateAccountResponse(BaseModel):
    """A candidate's application as seen by administrators."""

    model_config = {"from_attributes": True}

    id: str
    email: str
    full_name: str
    date_of_birth: date | None = None
    party: str
    manifesto: str
    image_url: str | None = None
    is_approved: bool
    is_verified: bool
    registered_at: datetime


class PaginatedCandidateAccountResponse(BaseModel):
    """Paginated list of candidate accounts."""

    items: list[CandidateAccountResponse]
    pagination: PaginationMeta

"""Authentication and user Pydantic v2 schemas.

Defines request/response schemas for login, token refresh, self-registration
and user management.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from ballot_api.schemas.common import ImageUrl, PaginationMeta

_ROLE_PATTERN = "^(admin|voter|candidate)$"
MINIMUM_CANDIDATE_AGE = 21


class LoginRequest(BaseModel):
    """Login request with username and password."""

    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=8)


class RefreshRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str


class TokenResponse(BaseModel):
    """JWT token pair response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token expiration in seconds")


class UserCreateRequest(BaseModel):
    """Request to create a new user."""

    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)
    role: str = Field(pattern=_ROLE_PATTERN)


class VoterSignupRequest(BaseModel):
    """Voter self-registration."""

    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)


class CandidateSignupRequest(VoterSignupRequest):
    """Candidate self-registration with the application details an admin reviews."""

    full_name: str = Field(min_length=3, max_length=200)
    date_of_birth: date
    national_id: str = Field(min_length=5, max_length=50)
    party: str = Field(min_length=2, max_length=200)
    manifesto: str = Field(min_length=20)
    image_url: ImageUrl = None

    @field_validator("date_of_birth")
    @classmethod
    def candidate_minimum_age(cls, v: date) -> date:
        today = date.today()
        age = today.year - v.year - ((today.month, today.day) < (v.month, v.day))
        if age < MINIMUM_CANDIDATE_AGE:
            msg = f"Candidate must be at least {MINIMUM_CANDIDATE_AGE} years old."
            raise ValueError(msg)
        return v


class UserResponse(BaseModel):
    """User information response."""

    id: UUID
    username: str
    email: str
    role: str
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class PaginatedUserResponse(BaseModel):
    items: list[UserResponse]
    pagination: PaginationMeta

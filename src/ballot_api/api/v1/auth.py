"""Identity endpoints.

POST /auth/login, POST /auth/refresh, GET /auth/me,
POST /auth/register, POST /auth/register/candidate,
GET /users, POST /users (admin).
"""

import math
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings, get_settings
from ballot_api.core.dependencies import get_async_session, get_current_user, require_role
from ballot_api.models.user import User
from ballot_api.schemas.auth import (
    CandidateSignupRequest,
    PaginatedUserResponse,
    RefreshRequest,
    TokenResponse,
    UserCreateRequest,
    UserResponse,
    VoterSignupRequest,
)
from ballot_api.schemas.common import PaginationMeta, PaginationParams
from ballot_api.services import auth_service

router = APIRouter(tags=["auth"])

SessionDep = Annotated[AsyncSession, Depends(get_async_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
AdminDep = Annotated[User, Depends(require_role("admin"))]


@router.post("/auth/login", response_model=TokenResponse)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: SessionDep,
    settings: SettingsDep,
) -> TokenResponse:
    """Exchange a username and password for an access/refresh token pair."""
    return await auth_service.login(session, form_data.username, form_data.password, settings)


@router.post("/auth/refresh", response_model=TokenResponse)
async def refresh_token(body: RefreshRequest, session: SessionDep, settings: SettingsDep) -> TokenResponse:
    return await auth_service.refresh_access_token(session, body.refresh_token, settings)


@router.get("/auth/me", response_model=UserResponse)
async def get_me(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    return current_user


@router.post("/auth/register", response_model=UserResponse, status_code=201)
async def register_voter(body: VoterSignupRequest, session: SessionDep) -> User:
    """Self-register as a voter. Voting requires admin verification and eligibility."""
    return await auth_service.register_voter(session, body)


@router.post("/auth/register/candidate", response_model=UserResponse, status_code=201)
async def register_candidate(body: CandidateSignupRequest, session: SessionDep) -> User:
    """Self-register as a candidate. Registering in elections requires admin approval."""
    return await auth_service.register_candidate(session, body)


@router.get("/users", response_model=PaginatedUserResponse)
async def list_users(
    _admin: AdminDep,
    session: SessionDep,
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedUserResponse:
    """List accounts in creation order."""
    users, total = await auth_service.list_users(session, pagination.page, pagination.page_size)
    return PaginatedUserResponse(
        items=[UserResponse.model_validate(u) for u in users],
        pagination=PaginationMeta(
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=math.ceil(total / pagination.page_size),
        ),
    )


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(body: UserCreateRequest, _admin: AdminDep, session: SessionDep) -> User:
    """Create an account with any role. No voter record or candidate account is attached."""
    return await auth_service.create_user(session, body)

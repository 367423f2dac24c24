"""Authentication and user management service.

Handles user authentication, creation, self-registration of voters and
candidates, token generation, and refresh.
"""

import uuid
from datetime import UTC, datetime

import jwt
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.config import Settings
from ballot_api.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from ballot_api.models.user import User
from ballot_api.schemas.auth import CandidateSignupRequest, TokenResponse, UserCreateRequest, VoterSignupRequest
from ballot_api.services.candidate_account_service import create_candidate_account
from ballot_api.services.errors import DuplicateUserError, InvalidCredentialsError, InvalidRefreshTokenError
from ballot_api.services.voter_service import create_voter_record


async def authenticate_user(session: AsyncSession, username: str, password: str) -> User | None:
    """Authenticate a user by username and password.

    Args:
        session: The database session.
        username: The username to authenticate.
        password: The plaintext password.

    Returns:
        The User if authentication succeeds, None otherwise.
    """
    result = await session.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        return None
    user.last_login_at = datetime.now(UTC)
    await session.commit()
    return user


async def login(session: AsyncSession, username: str, password: str, settings: Settings) -> TokenResponse:
    """Authenticate and issue a token pair.

    Raises:
        InvalidCredentialsError: If the credentials are wrong or the user is inactive.
    """
    user = await authenticate_user(session, username, password)
    if user is None:
        logger.info("Rejected login for {!r}", username)
        raise InvalidCredentialsError
    return generate_tokens(user, settings)


async def _ensure_unique(session: AsyncSession, username: str, email: str) -> None:
    existing = await session.execute(select(User.id).where((User.username == username) | (User.email == email)))
    if existing.first() is not None:
        raise DuplicateUserError


def _new_user(username: str, email: str, password: str, role: str) -> User:
    return User(
        id=uuid.uuid4(),
        username=username,
        email=email,
        hashed_password=hash_password(password),
        role=role,
    )


async def create_user(session: AsyncSession, request: UserCreateRequest) -> User:
    """Create a new user.

    Args:
        session: The database session.
        request: User creation request data.

    Returns:
        The created User.

    Raises:
        DuplicateUserError: If username or email already exists.
    """
    await _ensure_unique(session, request.username, request.email)
    user = _new_user(request.username, request.email, request.password, request.role)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def register_voter(session: AsyncSession, request: VoterSignupRequest) -> User:
    """Create a voter account and its (unverified, ineligible) voter record.

    Raises:
        DuplicateUserError: If username or email already exists.
    """
    await _ensure_unique(session, request.username, request.email)
    user = _new_user(request.username, request.email, request.password, "voter")
    session.add(user)
    session.add(create_voter_record(str(user.id), request.email))
    await session.commit()
    await session.refresh(user)
    logger.info("Registered voter {}", user.id)
    return user


async def register_candidate(session: AsyncSession, request: CandidateSignupRequest) -> User:
    """Create a candidate account awaiting administrator approval.

    Raises:
        DuplicateUserError: If username or email already exists.
    """
    await _ensure_unique(session, request.username, request.email)
    user = _new_user(request.username, request.email, request.password, "candidate")
    session.add(user)
    session.add(create_candidate_account(str(user.id), request))
    await session.commit()
    await session.refresh(user)
    logger.info("Registered candidate account {}", user.id)
    return user


async def list_users(session: AsyncSession, page: int = 1, page_size: int = 20) -> tuple[list[User], int]:
    """List users with pagination.

    Args:
        session: The database session.
        page: Page number (1-based).
        page_size: Items per page.

    Returns:
        Tuple of (users list, total count).
    """
    count_result = await session.execute(select(func.count(User.id)))
    total = count_result.scalar_one()

    offset = (page - 1) * page_size
    result = await session.execute(select(User).offset(offset).limit(page_size).order_by(User.created_at))
    users = list(result.scalars().all())
    return users, total


def generate_tokens(user: User, settings: Settings) -> TokenResponse:
    """Generate access and refresh tokens for a user.

    Args:
        user: The authenticated user.
        settings: Application settings.

    Returns:
        Token response with access and refresh tokens.
    """
    access_token = create_access_token(
        subject=str(user.id),
        role=user.role,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_access_token_expire_minutes,
        email=user.email,
    )
    refresh_token = create_refresh_token(
        subject=str(user.id),
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_days=settings.jwt_refresh_token_expire_days,
    )
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


async def refresh_access_token(
    session: AsyncSession,
    refresh_token_str: str,
    settings: Settings,
) -> TokenResponse:
    """Refresh an access token using a refresh token.

    Args:
        session: The database session.
        refresh_token_str: The refresh token string.
        settings: Application settings.

    Returns:
        New token response.

    Raises:
        InvalidRefreshTokenError: If the token is invalid, is not a refresh
            token, or names an unknown or inactive user.
    """
    try:
        payload = decode_token(refresh_token_str, settings.jwt_secret_key, settings.jwt_algorithm)
    except jwt.PyJWTError as e:
        raise InvalidRefreshTokenError from e

    if payload.get("type") != "refresh":
        raise InvalidRefreshTokenError("Token is not a refresh token")

    try:
        user_id = uuid.UUID(payload.get("sub"))
    except (TypeError, ValueError) as e:
        raise InvalidRefreshTokenError("Invalid token payload") from e

    user = await get_user(session, user_id)
    if user is None or not user.is_active:
        raise InvalidRefreshTokenError("User not found or inactive")

    return generate_tokens(user, settings)


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Get a user by ID.

    Args:
        session: The database session.
        user_id: The UUID of the user to retrieve.

    Returns:
        The User if found, None otherwise.
    """
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

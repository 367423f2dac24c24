"""Shared test fixtures for async database, sessions, users, auth tokens and the app."""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ballot_api.core.config import Settings, get_settings
from ballot_api.core.dependencies import get_async_session
from ballot_api.core.security import create_access_token, hash_password
from ballot_api.models.base import Base
from ballot_api.models.candidate_account import CandidateAccount
from ballot_api.models.election import Candidate, Election
from ballot_api.models.user import User
from ballot_api.models.voter import VoterRecord

TEST_PASSWORD = "testpassword123"


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key-not-for-production",
        jwt_algorithm="HS256",
        jwt_access_token_expire_minutes=30,
        jwt_refresh_token_expire_days=7,
        rate_limit_per_minute=10_000,
        rate_limit_sensitive_per_minute=10_000,
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine shared by every session of a test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    async with session_factory() as session:
        yield session


# --- Users ---


UserFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def make_user(async_session: AsyncSession) -> UserFactory:
    """Factory creating a user plus the voter record or candidate account its role implies.

    Keyword args:
        role: "admin", "voter" or "candidate".
        is_eligible / is_verified: voter record flags (voters only).
        with_record: create the voter record (voters only).
        is_approved: candidate account flag (candidates only).
    """

    async def _make(
        role: str = "voter",
        *,
        username: str | None = None,
        is_eligible: bool = True,
        is_verified: bool = True,
        with_record: bool = True,
        is_approved: bool = True,
    ) -> User:
        name = username or f"{role}-{uuid.uuid4().hex[:8]}"
        user = User(
            id=uuid.uuid4(),
            username=name,
            email=f"{name}@test.com",
            hashed_password=hash_password(TEST_PASSWORD),
            role=role,
        )
        async_session.add(user)
        if role == "voter" and with_record:
            async_session.add(
                VoterRecord(id=str(user.id), email=user.email, is_eligible=is_eligible, is_verified=is_verified)
            )
        if role == "candidate":
            async_session.add(
                CandidateAccount(
                    id=str(user.id),
                    email=user.email,
                    full_name="Casey Candidate",
                    party="Independent",
                    manifesto="A manifesto that is comfortably long enough.",
                    is_approved=is_approved,
                )
            )
        await async_session.commit()
        await async_session.refresh(user)
        return user

    return _make


@pytest.fixture
async def sample_user(make_user: UserFactory) -> User:
    """Create a sample admin user in the test database."""
    return await make_user("admin", username="testadmin")


@pytest.fixture
def token_for(settings: Settings) -> Callable[[User], str]:
    """Generate a JWT access token for a user."""

    def _token(user: User) -> str:
        return create_access_token(
            subject=str(user.id),
            role=user.role,
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            email=user.email,
        )

    return _token


# --- Elections ---


ElectionFactory = Callable[..., Awaitable[Election]]


@pytest.fixture
def make_election(async_session: AsyncSession) -> ElectionFactory:
    """Factory persisting an election with candidates directly, bypassing validation.

    ``start`` and ``end`` are offsets from now; the default is an ongoing election.
    """

    async def _make(
        *,
        start: timedelta = timedelta(days=-1),
        end: timedelta = timedelta(days=1),
        candidates: list[tuple[str, int]] | None = None,
        name: str = "City Council Election",
    ) -> Election:
        now = datetime.now(UTC)
        election = Election(
            name=name,
            description="Election of three council members.",
            start_date=now + start,
            end_date=now + end,
            candidates=[
                Candidate(
                    name=cand_name,
                    party="Party " + cand_name,
                    platform="A platform worth voting for.",
                    ballot_order=order,
                    vote_count=votes,
                )
                for order, (cand_name, votes) in enumerate(candidates or [("Alice", 0), ("Bob", 0)], start=1)
            ],
        )
        async_session.add(election)
        await async_session.commit()
        await async_session.refresh(election, attribute_names=["candidates"])
        return election

    return _make


# --- Application ---


@pytest.fixture
def app(settings: Settings, session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """The full application wired to the test database."""
    from ballot_api.main import create_app

    with patch("ballot_api.main.get_settings", return_value=settings):
        application = create_app()

    async def _session_override() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_async_session] = _session_override
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

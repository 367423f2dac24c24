"""Election service: business logic for elections, registration, voting and results.

Every phase decision goes through :func:`classify_election`, so the same
end-of-day convention applies to responses, list filtering, registration
and voting.
"""

import uuid
from datetime import UTC, datetime, time

from loguru import logger
from sqlalchemy import Update, and_, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.lib.election_rules import (
    NOT_REGISTERED_MESSAGE,
    ElectionPhase,
    RegistrationWindow,
    TallyEntry,
    as_utc,
    classify_election,
    rank_tally,
    registration_open,
    total_votes,
    voting_block_reason,
)
from ballot_api.models.candidate_account import CandidateAccount
from ballot_api.models.election import Candidate, Election, VoteLedgerEntry
from ballot_api.models.user import User
from ballot_api.models.voter import VoterRecord
from ballot_api.schemas.election import (
    CandidateCreateRequest,
    CandidateResponse,
    CandidateTally,
    ElectionCreateRequest,
    ElectionDetailResponse,
    ElectionResultsResponse,
    ElectionSummary,
)
from ballot_api.services.errors import (
    AlreadyVotedError,
    BallotOrderConflictError,
    CandidateNotApprovedError,
    CandidateNotFoundError,
    ElectionNotFoundError,
    ElectionNotStartedError,
    NotEligibleToVoteError,
    NotPermittedError,
    RegistrationClosedError,
    VoteRecordingError,
    VotingClosedError,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _start_of_day(now: datetime) -> datetime:
    """Midnight UTC of ``now``'s day; an election is concluded once its end date falls before it."""
    return datetime.combine(as_utc(now).date(), time.min, tzinfo=UTC)


def _candidate_from_request(request: CandidateCreateRequest, ballot_order: int) -> Candidate:
    return Candidate(
        name=request.name,
        party=request.party,
        platform=request.platform,
        image_url=request.image_url,
        ballot_order=ballot_order,
        vote_count=0,
    )


# --- Create / read / delete ---


async def create_election(
    session: AsyncSession,
    request: ElectionCreateRequest,
    *,
    created_by: str | None = None,
) -> Election:
    """Create an election together with its initial candidates.

    Args:
        session: Async database session.
        request: Validated creation request (``end_date > start_date``, at
            least one candidate).
        created_by: Subject id of the creating administrator.

    Returns:
        The created Election with candidates loaded.
    """
    election = Election(
        name=request.name,
        description=request.description,
        start_date=as_utc(request.start_date),
        end_date=as_utc(request.end_date),
        created_by=created_by,
        candidates=[_candidate_from_request(c, order) for order, c in enumerate(request.candidates, start=1)],
    )
    session.add(election)
    await session.commit()
    logger.info("Created election {} with {} candidates", election.id, len(request.candidates))
    return await _require_election(session, election.id)


async def get_election_by_id(
    session: AsyncSession,
    election_id: uuid.UUID,
) -> Election | None:
    """Get an election by ID, re-reading it and its candidates from the store.

    Args:
        session: Async database session.
        election_id: The election UUID.

    Returns:
        Election instance or None if not found.
    """
    result = await session.execute(
        select(Election).where(Election.id == election_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _require_election(session: AsyncSession, election_id: uuid.UUID) -> Election:
    election = await get_election_by_id(session, election_id)
    if election is None:
        raise ElectionNotFoundError
    return election


async def list_elections(
    session: AsyncSession,
    *,
    phase: ElectionPhase | None = None,
    page: int = 1,
    page_size: int = 20,
    now: datetime | None = None,
) -> tuple[list[ElectionSummary], int]:
    """List elections, newest start first, optionally filtered by phase.

    Args:
        session: Async database session.
        phase: Only return elections in this phase at ``now``.
        page: Page number (1-indexed).
        page_size: Results per page.
        now: Reference instant; defaults to the current time.

    Returns:
        Tuple of (election summaries, total count).
    """
    current = as_utc(now or _utcnow())
    midnight = _start_of_day(current)

    filters = []
    if phase is ElectionPhase.UPCOMING:
        filters.append(Election.start_date > current)
    elif phase is ElectionPhase.CONCLUDED:
        filters.append(Election.end_date < midnight)
    elif phase is ElectionPhase.ONGOING:
        filters.append(and_(Election.start_date <= current, Election.end_date >= midnight))

    query = select(Election)
    count_query = select(func.count(Election.id))
    if filters:
        query = query.where(and_(*filters))
        count_query = count_query.where(and_(*filters))

    total = (await session.execute(count_query)).scalar_one()

    offset = (page - 1) * page_size
    query = query.order_by(Election.start_date.desc()).offset(offset).limit(page_size)
    result = await session.execute(query)
    elections = result.scalars().all()

    return [build_summary(election, current) for election in elections], total


async def delete_election(session: AsyncSession, election_id: uuid.UUID) -> None:
    """Delete an election with its candidates and ledger entries.

    Raises:
        ElectionNotFoundError: If the election does not exist.
    """
    election = await _require_election(session, election_id)
    await session.delete(election)
    await session.commit()
    logger.info("Deleted election {}", election_id)


def build_summary(election: Election, now: datetime | None = None) -> ElectionSummary:
    """Build an ElectionSummary from an Election model instance."""
    return ElectionSummary(
        id=election.id,
        name=election.name,
        description=election.description,
        start_date=as_utc(election.start_date),
        end_date=as_utc(election.end_date),
        phase=classify_election(now or _utcnow(), election.start_date, election.end_date),
        candidate_count=len(election.candidates),
    )


def build_detail_response(election: Election, now: datetime | None = None) -> ElectionDetailResponse:
    """Build an ElectionDetailResponse from an Election model instance."""
    return ElectionDetailResponse(
        id=election.id,
        name=election.name,
        description=election.description,
        start_date=as_utc(election.start_date),
        end_date=as_utc(election.end_date),
        phase=classify_election(now or _utcnow(), election.start_date, election.end_date),
        created_by=election.created_by,
        candidates=[CandidateResponse.model_validate(c) for c in election.candidates],
        created_at=as_utc(election.created_at),
        updated_at=as_utc(election.updated_at),
    )


# --- Candidate registration ---


async def ensure_may_register(session: AsyncSession, user: User) -> None:
    """Check that ``user`` may add candidates to an election.

    Administrators always may; candidates need an approved candidate account.

    Raises:
        CandidateNotApprovedError: If the candidate's account is missing or unapproved.
        NotPermittedError: For any other role.
    """
    if user.role == "admin":
        return
    if user.role != "candidate":
        msg = "Only administrators and approved candidates may register candidates."
        raise NotPermittedError(msg)
    account = await session.get(CandidateAccount, str(user.id))
    if account is None or not account.is_approved:
        raise CandidateNotApprovedError


# Positions taken by a concurrent registration are retried this many times.
REGISTER_ATTEMPTS = 5


async def register_candidate(
    session: AsyncSession,
    election_id: uuid.UUID,
    request: CandidateCreateRequest,
    *,
    user: User | None = None,
    window: RegistrationWindow = "until_concluded",
    now: datetime | None = None,
) -> Candidate:
    """Append a candidate to an election while registration is open.

    The next ballot position is ``max + 1``. A unique constraint on
    ``(election_id, ballot_order)`` rejects a position claimed concurrently,
    in which case the position is recomputed and the insert retried.

    Args:
        session: Async database session.
        election_id: The election UUID.
        request: Validated candidate fields.
        user: The caller, checked with :func:`ensure_may_register` once the
            election is known to exist. None skips the check.
        window: Which phases accept registrations.
        now: Reference instant; defaults to the current time.

    Returns:
        The new Candidate with a fresh id and ``vote_count`` 0.

    Raises:
        ElectionNotFoundError: If the election does not exist.
        NotPermittedError: If ``user`` may not register candidates.
        RegistrationClosedError: If the registration window has closed.
        BallotOrderConflictError: If every attempt lost its position to a concurrent registration.
    """
    election = await _require_election(session, election_id)
    if user is not None:
        await ensure_may_register(session, user)
    phase = classify_election(now or _utcnow(), election.start_date, election.end_date)
    if not registration_open(phase, window):
        if phase is ElectionPhase.CONCLUDED:
            raise RegistrationClosedError
        msg = "This election has already started. Registration is closed."
        raise RegistrationClosedError(msg)

    for attempt in range(1, REGISTER_ATTEMPTS + 1):
        max_order = (
            await session.execute(select(func.max(Candidate.ballot_order)).where(Candidate.election_id == election_id))
        ).scalar_one()
        candidate = _candidate_from_request(request, (max_order or 0) + 1)
        candidate.election_id = election_id
        session.add(candidate)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            logger.warning(
                "Ballot position {} in election {} taken, retrying (attempt {})",
                candidate.ballot_order,
                election_id,
                attempt,
            )
            continue
        await session.refresh(candidate)
        logger.info("Registered candidate {} in election {}", candidate.id, election_id)
        return candidate
    raise BallotOrderConflictError


# --- Voting ---


def build_increment_statement(election_id: uuid.UUID, candidate_id: str) -> Update:
    """Single-row ``vote_count = vote_count + 1`` update, filtered by election and candidate.

    The arithmetic runs in the database so concurrent increments never lose
    updates.
    """
    return (
        update(Candidate)
        .where(Candidate.election_id == election_id, Candidate.id == candidate_id)
        .values(vote_count=Candidate.vote_count + 1)
        .execution_options(synchronize_session=False)
    )


async def _check_may_vote(session: AsyncSession, user: User) -> None:
    if user.role != "voter":
        return
    record = await session.get(VoterRecord, str(user.id), populate_existing=True)
    reason = voting_block_reason(
        user.role,
        is_registered=record is not None,
        is_eligible=record is not None and record.is_eligible,
        is_verified=record is not None and record.is_verified,
    )
    if reason == NOT_REGISTERED_MESSAGE:
        raise NotPermittedError(reason)
    if reason is not None:
        raise NotEligibleToVoteError(reason)


async def _has_voted(session: AsyncSession, election_id: uuid.UUID, voter_id: str) -> bool:
    result = await session.execute(
        select(VoteLedgerEntry.id).where(
            VoteLedgerEntry.election_id == election_id,
            VoteLedgerEntry.voter_id == voter_id,
        )
    )
    return result.first() is not None


async def record_vote(
    session: AsyncSession,
    election_id: uuid.UUID,
    candidate_id: str,
    user: User,
    *,
    now: datetime | None = None,
) -> None:
    """Record one ballot for ``candidate_id`` cast by ``user``.

    Checks run in order: election exists, election is ongoing, candidate
    belongs to the election, the user may vote, the user has not voted in
    this election. The ledger insert and the counter increment commit
    together or not at all.

    Args:
        session: Async database session.
        election_id: The election UUID.
        candidate_id: The chosen candidate's id.
        user: The authenticated voter.
        now: Reference instant; defaults to the current time.

    Raises:
        ElectionNotFoundError: If the election does not exist.
        ElectionNotStartedError: If the election is upcoming.
        VotingClosedError: If the election has concluded.
        CandidateNotFoundError: If the candidate is not on this ballot.
        NotPermittedError: If the voter is unregistered, ineligible or unverified.
        AlreadyVotedError: If the user has already voted in this election.
        VoteRecordingError: If the counter update matched no row.
    """
    election = await _require_election(session, election_id)

    phase = classify_election(now or _utcnow(), election.start_date, election.end_date)
    if phase is ElectionPhase.UPCOMING:
        logger.info("Rejected vote in election {}: not started", election_id)
        raise ElectionNotStartedError
    if phase is ElectionPhase.CONCLUDED:
        logger.info("Rejected vote in election {}: concluded", election_id)
        raise VotingClosedError

    if all(c.id != candidate_id for c in election.candidates):
        raise CandidateNotFoundError

    await _check_may_vote(session, user)

    voter_id = str(user.id)
    if await _has_voted(session, election_id, voter_id):
        raise AlreadyVotedError

    session.add(VoteLedgerEntry(election_id=election_id, voter_id=voter_id))
    try:
        await session.flush()
    except IntegrityError as e:
        # A concurrent request from the same voter won the unique index
        await session.rollback()
        raise AlreadyVotedError from e

    result = await session.execute(build_increment_statement(election_id, candidate_id))
    if result.rowcount != 1:
        await session.rollback()
        logger.error(
            "Vote increment matched {} rows for candidate {} in election {}",
            result.rowcount,
            candidate_id,
            election_id,
        )
        raise VoteRecordingError

    await session.commit()
    logger.info("Recorded vote in election {} for candidate {}", election_id, candidate_id)


# --- Results ---


async def get_results(
    session: AsyncSession,
    election_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> ElectionResultsResponse:
    """Tally an election, highest vote count first with ties in ballot order.

    Counters are always re-read from the store. Safe in any phase.

    Raises:
        ElectionNotFoundError: If the election does not exist.
    """
    election = await _require_election(session, election_id)
    result = await session.execute(
        select(Candidate)
        .where(Candidate.election_id == election_id)
        .order_by(Candidate.ballot_order, Candidate.created_at, Candidate.id)
        .execution_options(populate_existing=True)
    )
    entries = [
        TallyEntry(
            candidate_id=c.id,
            candidate_name=c.name,
            party=c.party,
            vote_count=c.vote_count,
        )
        for c in result.scalars().all()
    ]
    ranked = rank_tally(entries)
    return ElectionResultsResponse(
        election_id=election.id,
        election_name=election.name,
        phase=classify_election(now or _utcnow(), election.start_date, election.end_date),
        results=[
            CandidateTally(
                candidate_id=e.candidate_id,
                candidate_name=e.candidate_name,
                party=e.party,
                vote_count=e.vote_count,
            )
            for e in ranked
        ],
        total_votes=total_votes(ranked),
    )

"""Voter record service.

Voter records are created at self-registration with both flags off; only an
administrator changes ``is_verified`` and ``is_eligible``, each with a single
conditional UPDATE.
"""

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.models.voter import VoterRecord
from ballot_api.services.errors import VoterNotFoundError


def create_voter_record(voter_id: str, email: str) -> VoterRecord:
    """Build an unverified, ineligible voter record for a new voter account."""
    return VoterRecord(id=voter_id, email=email, is_eligible=False, is_verified=False)


async def get_voter(session: AsyncSession, voter_id: str) -> VoterRecord | None:
    """Get a voter record by subject id, re-read from the store."""
    return await session.get(VoterRecord, voter_id, populate_existing=True)


async def list_voters(
    session: AsyncSession,
    *,
    is_verified: bool | None = None,
    is_eligible: bool | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[VoterRecord], int]:
    """List voter records, oldest registration first.

    Args:
        session: The database session.
        is_verified: Filter by verification flag.
        is_eligible: Filter by eligibility flag.
        page: Page number (1-based).
        page_size: Items per page.

    Returns:
        Tuple of (voter records, total count).
    """
    query = select(VoterRecord)
    count_query = select(func.count(VoterRecord.id))
    if is_verified is not None:
        query = query.where(VoterRecord.is_verified == is_verified)
        count_query = count_query.where(VoterRecord.is_verified == is_verified)
    if is_eligible is not None:
        query = query.where(VoterRecord.is_eligible == is_eligible)
        count_query = count_query.where(VoterRecord.is_eligible == is_eligible)

    total = (await session.execute(count_query)).scalar_one()

    offset = (page - 1) * page_size
    result = await session.execute(
        query.order_by(VoterRecord.registered_at, VoterRecord.id).offset(offset).limit(page_size)
    )
    return list(result.scalars().all()), total


async def _set_flag(session: AsyncSession, voter_id: str, **values: bool) -> None:
    result = await session.execute(
        update(VoterRecord)
        .where(VoterRecord.id == voter_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await session.rollback()
        raise VoterNotFoundError
    await session.commit()


async def set_verified(session: AsyncSession, voter_id: str, is_verified: bool) -> None:
    """Set a voter's verification flag.

    Raises:
        VoterNotFoundError: If no voter record has this id.
    """
    await _set_flag(session, voter_id, is_verified=is_verified)
    logger.info("Voter {} verification set to {}", voter_id, is_verified)


async def set_eligible(session: AsyncSession, voter_id: str, is_eligible: bool) -> None:
    """Set a voter's eligibility flag.

    Raises:
        VoterNotFoundError: If no voter record has this id.
    """
    await _set_flag(session, voter_id, is_eligible=is_eligible)
    logger.info("Voter {} eligibility set to {}", voter_id, is_eligible)

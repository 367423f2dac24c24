"""Candidate account service: listing and the admin approval toggle."""

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.models.candidate_account import CandidateAccount
from ballot_api.schemas.auth import CandidateSignupRequest
from ballot_api.services.errors import CandidateAccountNotFoundError


def create_candidate_account(account_id: str, request: CandidateSignupRequest) -> CandidateAccount:
    """Build an unapproved candidate account from a signup request."""
    return CandidateAccount(
        id=account_id,
        email=request.email,
        full_name=request.full_name,
        date_of_birth=request.date_of_birth,
        national_id=request.national_id,
        party=request.party,
        manifesto=request.manifesto,
        image_url=request.image_url,
        is_approved=False,
        is_verified=False,
    )


async def get_candidate_account(session: AsyncSession, account_id: str) -> CandidateAccount | None:
    return await session.get(CandidateAccount, account_id, populate_existing=True)


async def list_candidate_accounts(
    session: AsyncSession,
    *,
    is_approved: bool | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[CandidateAccount], int]:
    """List candidate accounts, oldest registration first.

    Args:
        session: The database session.
        is_approved: Filter by approval flag.
        page: Page number (1-based).
        page_size: Items per page.

    Returns:
        Tuple of (candidate accounts, total count).
    """
    query = select(CandidateAccount)
    count_query = select(func.count(CandidateAccount.id))
    if is_approved is not None:
        query = query.where(CandidateAccount.is_approved == is_approved)
        count_query = count_query.where(CandidateAccount.is_approved == is_approved)

    total = (await session.execute(count_query)).scalar_one()

    offset = (page - 1) * page_size
    result = await session.execute(
        query.order_by(CandidateAccount.registered_at, CandidateAccount.id).offset(offset).limit(page_size)
    )
    return list(result.scalars().all()), total


async def set_approval(session: AsyncSession, account_id: str, is_approved: bool) -> None:
    """Approve or revoke a candidate account with a single UPDATE.

    Raises:
        CandidateAccountNotFoundError: If no candidate account has this id.
    """
    result = await session.execute(
        update(CandidateAccount)
        .where(CandidateAccount.id == account_id)
        .values(is_approved=is_approved)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await session.rollback()
        raise CandidateAccountNotFoundError
    await session.commit()
    logger.info("Candidate account {} approval set to {}", account_id, is_approved)

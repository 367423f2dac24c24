"""Candidate account record keyed by identity subject id.

Separate from the per-election Candidate rows: this is the person's
application to stand, reviewed by an administrator.
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, String, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column

from ballot_api.models.base import Base


class CandidateAccount(Base):
    """A self-registered candidate awaiting or holding approval."""

    __tablename__ = "candidate_accounts"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    national_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    party: Mapped[str] = mapped_column(String(200), nullable=False)
    manifesto: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

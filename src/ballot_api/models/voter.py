"""Voter registration record keyed by identity subject id."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, false, func
from sqlalchemy.orm import Mapped, mapped_column

from ballot_api.models.base import Base


class VoterRecord(Base):
    """A self-registered voter. Flags are changed only by administrators."""

    __tablename__ = "voters"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_eligible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

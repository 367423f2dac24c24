"""Election ORM models.

Provides Election, its ordered Candidate list, and the VoteLedgerEntry
table that records which voters have cast a ballot in which election.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ballot_api.models.base import Base, TimestampMixin, UUIDMixin


def _new_candidate_id() -> str:
    return str(uuid.uuid4())


class Election(Base, UUIDMixin, TimestampMixin):
    """An election with a voting window and its registered candidates."""

    __tablename__ = "elections"

    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Relationships
    candidates: Mapped[list["Candidate"]] = relationship(
        back_populates="election",
        cascade="all, delete-orphan",
        order_by="[Candidate.ballot_order, Candidate.created_at, Candidate.id]",
        lazy="selectin",
    )
    ledger_entries: Mapped[list["VoteLedgerEntry"]] = relationship(
        back_populates="election",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_election_dates"),
        Index("idx_elections_start_date", "start_date"),
    )


class Candidate(Base):
    """A candidate standing in one election, carrying that election's vote counter."""

    __tablename__ = "candidates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_candidate_id)
    election_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("elections.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    party: Mapped[str] = mapped_column(String(200), nullable=False)
    platform: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    ballot_order: Mapped[int] = mapped_column(Integer, nullable=False)
    vote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    election: Mapped["Election"] = relationship(back_populates="candidates")

    __table_args__ = (
        CheckConstraint("vote_count >= 0", name="ck_candidate_vote_count"),
        UniqueConstraint("election_id", "ballot_order", name="uq_candidates_election_ballot_order"),
        Index("idx_candidates_election_id", "election_id"),
    )


class VoteLedgerEntry(Base, UUIDMixin):
    """Proof that a voter has cast a ballot in an election.

    Deliberately does not record the chosen candidate.
    """

    __tablename__ = "vote_ledger"

    election_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("elections.id", ondelete="CASCADE"),
        nullable=False,
    )
    voter_id: Mapped[str] = mapped_column(String(128), nullable=False)
    cast_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    election: Mapped["Election"] = relationship(back_populates="ledger_entries")

    __table_args__ = (UniqueConstraint("election_id", "voter_id", name="uq_vote_ledger_election_voter"),)

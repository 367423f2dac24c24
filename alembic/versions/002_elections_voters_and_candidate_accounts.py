"""Elections, candidates, vote ledger, voters and candidate_accounts tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "elections",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("end_date > start_date", name="ck_election_dates"),
    )
    op.create_index("idx_elections_start_date", "elections", ["start_date"])

    op.create_table(
        "candidates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "election_id",
            sa.Uuid(),
            sa.ForeignKey("elections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("party", sa.String(200), nullable=False),
        sa.Column("platform", sa.Text, nullable=False),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("ballot_order", sa.Integer, nullable=False),
        sa.Column("vote_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("vote_count >= 0", name="ck_candidate_vote_count"),
        sa.UniqueConstraint("election_id", "ballot_order", name="uq_candidates_election_ballot_order"),
    )
    op.create_index("idx_candidates_election_id", "candidates", ["election_id"])

    # One row per (election, voter); never records the chosen candidate
    op.create_table(
        "vote_ledger",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "election_id",
            sa.Uuid(),
            sa.ForeignKey("elections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("voter_id", sa.String(128), nullable=False),
        sa.Column("cast_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("election_id", "voter_id", name="uq_vote_ledger_election_voter"),
    )

    op.create_table(
        "voters",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("is_eligible", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("registered_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_voters_email", "voters", ["email"])

    op.create_table(
        "candidate_accounts",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("national_id", sa.String(50), nullable=True),
        sa.Column("party", sa.String(200), nullable=False),
        sa.Column("manifesto", sa.Text, nullable=False),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("is_approved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("registered_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_candidate_accounts_email", "candidate_accounts", ["email"])


def downgrade() -> None:
    op.drop_table("candidate_accounts")
    op.drop_table("voters")
    op.drop_table("vote_ledger")
    op.drop_table("candidates")
    op.drop_table("elections")

"""ORM model registry: import all models so Alembic autogenerate discovers them."""

from ballot_api.models.audit_log import AuditLog
from ballot_api.models.candidate_account import CandidateAccount
from ballot_api.models.election import Candidate, Election, VoteLedgerEntry
from ballot_api.models.user import User
from ballot_api.models.voter import VoterRecord

__all__ = [
    "AuditLog",
    "Candidate",
    "CandidateAccount",
    "Election",
    "User",
    "VoteLedgerEntry",
    "VoterRecord",
]

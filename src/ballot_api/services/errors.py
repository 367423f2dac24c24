"""Domain exceptions raised by the service layer.

Each exception carries the HTTP status and machine-readable code it is
rendered with, so routes and the CLI can let them propagate unchanged.
"""


class ServiceError(Exception):
    """Base class for expected, user-facing service failures."""

    status_code = 400
    code = "bad_request"
    default_message = "The request could not be processed."
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(ServiceError):
    """Credentials or a token could not be validated."""

    status_code = 401
    code = "not_authenticated"
    default_message = "Could not validate credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    default_message = "Incorrect username or password"


class InvalidRefreshTokenError(AuthenticationError):
    code = "invalid_refresh_token"
    default_message = "Invalid refresh token"


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class ElectionNotFoundError(NotFoundError):
    code = "election_not_found"
    default_message = "Election not found."


class CandidateNotFoundError(NotFoundError):
    code = "candidate_not_found"
    default_message = "Candidate not found in this election."


class VoterNotFoundError(NotFoundError):
    code = "voter_not_found"
    default_message = "Voter not found."


class CandidateAccountNotFoundError(NotFoundError):
    code = "candidate_account_not_found"
    default_message = "Candidate account not found."


class ElectionPhaseError(ServiceError):
    """The election's lifecycle phase does not allow the operation."""

    status_code = 403
    code = "election_phase"


class ElectionNotStartedError(ElectionPhaseError):
    code = "election_not_started"
    default_message = "This election has not started yet."


class VotingClosedError(ElectionPhaseError):
    code = "voting_closed"
    default_message = "This election has concluded. Voting is closed."


class RegistrationClosedError(ElectionPhaseError):
    code = "registration_closed"
    default_message = "This election has concluded. Registration is closed."


class NotPermittedError(ServiceError):
    """The acting principal lacks a required approval or flag."""

    status_code = 403
    code = "not_permitted"
    default_message = "You are not permitted to perform this action."


class NotEligibleToVoteError(NotPermittedError):
    code = "not_eligible"
    default_message = "You are not eligible to vote in elections."


class CandidateNotApprovedError(NotPermittedError):
    code = "candidate_not_approved"
    default_message = "Your candidate account has not been approved."


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"
    default_message = "The resource already exists."


class AlreadyVotedError(ConflictError):
    code = "already_voted"
    default_message = "You have already voted in this election."


class DuplicateUserError(ConflictError):
    code = "duplicate_user"
    default_message = "Username or email already exists."


class BallotOrderConflictError(ConflictError):
    """Concurrent registrations kept claiming the same ballot position."""

    code = "ballot_order_conflict"
    default_message = "Could not assign a ballot position. Please try again."


class VoteRecordingError(ServiceError):
    """The counter update matched no row; nothing was recorded and a retry is safe."""

    status_code = 500
    code = "vote_not_recorded"
    default_message = "Failed to record vote. Candidate or election may not match."


class AssistantUnavailableError(ServiceError):
    status_code = 503
    code = "assistant_unavailable"
    default_message = "The election assistant is not configured."


class AssistantUpstreamError(ServiceError):
    status_code = 502
    code = "assistant_upstream_error"
    default_message = "The election assistant could not produce a response."

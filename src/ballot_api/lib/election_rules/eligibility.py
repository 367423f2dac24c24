"""Voting eligibility rule.

Candidates may always vote.  Voters need both the ``is_eligible`` and
``is_verified`` flags set by an administrator.  Any other role satisfies
the rule.
"""

NOT_REGISTERED_MESSAGE = "Voter registration not found."
NOT_ELIGIBLE_MESSAGE = "You are not eligible to vote in elections."
NOT_VERIFIED_MESSAGE = "Your voter account has not been verified."


def voting_block_reason(
    role: str,
    *,
    is_registered: bool = True,
    is_eligible: bool = False,
    is_verified: bool = False,
) -> str | None:
    """Return why ``role`` may not vote, or None when voting is allowed.

    Args:
        role: The principal's role.
        is_registered: Whether a voter record exists for the principal.
        is_eligible: The voter record's eligibility flag.
        is_verified: The voter record's verification flag.

    Returns:
        A human-readable message naming the first missing requirement.
    """
    if role != "voter":
        return None
    if not is_registered:
        return NOT_REGISTERED_MESSAGE
    if not is_eligible:
        return NOT_ELIGIBLE_MESSAGE
    if not is_verified:
        return NOT_VERIFIED_MESSAGE
    return None

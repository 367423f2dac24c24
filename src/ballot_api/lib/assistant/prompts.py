"""Prompt templates for the election assistant."""

from collections.abc import Iterable

ELECTION_ASSISTANT_INSTRUCTIONS = (
    "You are a helpful and informative AI assistant specializing in election processes and the history "
    "of elections around the world, including different countries and general global election history.\n"
    "Your goal is to provide clear, concise, and accurate answers to user questions on these topics.\n"
    "Avoid expressing personal opinions or speculating.\n"
    "If a question is outside the scope of election processes or history (e.g., candidate-specific "
    "information for an ongoing election, or topics unrelated to elections), politely state that you can "
    "only answer questions related to election systems, procedures, and historical facts about elections."
)

_SUMMARY_TEMPLATE = "Summarize the following candidate platform in a concise and objective manner:\n\n{text}"


def build_summary_prompt(platform_text: str) -> str:
    return _SUMMARY_TEMPLATE.format(text=platform_text)


def build_chat_prompt(query: str, history: Iterable[tuple[str | None, str | None]] = ()) -> str:
    """Render the assistant prompt with the prior conversation.

    Args:
        query: The user's new question.
        history: ``(user, model)`` pairs, oldest first. Missing halves render empty.

    Returns:
        The full prompt text.
    """
    lines = [ELECTION_ASSISTANT_INSTRUCTIONS, "", "Conversation History:"]
    for user_text, model_text in history:
        lines.append(f"User: {user_text or ''}")
        lines.append(f"Model: {model_text or ''}")
    lines.extend(["", f"User Query: {query}", "Your Response:"])
    return "\n".join(lines)

"""Election assistant service.

Wraps a generative-text provider to summarize candidate platforms and answer
questions about election processes. Never touches election data.
"""

from collections.abc import Sequence

from loguru import logger

from ballot_api.core.config import Settings
from ballot_api.lib.assistant import (
    AssistantProviderError,
    BaseTextGenerator,
    build_chat_prompt,
    build_summary_prompt,
    get_generator,
)
from ballot_api.schemas.assistant import ChatTurn
from ballot_api.services.errors import AssistantUnavailableError, AssistantUpstreamError


def create_generator(settings: Settings) -> BaseTextGenerator:
    """Build the configured text generator.

    Raises:
        AssistantUnavailableError: If no API key is configured.
    """
    if not settings.assistant_enabled:
        raise AssistantUnavailableError
    return get_generator(
        "gemini",
        api_key=settings.genai_api_key,
        model=settings.genai_model,
        base_url=settings.genai_base_url,
        timeout=settings.genai_timeout,
    )


async def _generate(generator: BaseTextGenerator, prompt: str) -> str:
    try:
        return await generator.generate(prompt)
    except AssistantProviderError as e:
        logger.warning("Assistant provider {} failed: {}", e.provider_name, e.message)
        raise AssistantUpstreamError from e


async def summarize_platform(generator: BaseTextGenerator, platform_text: str) -> str:
    """Return a concise, objective summary of a candidate platform."""
    return await _generate(generator, build_summary_prompt(platform_text))


async def answer_question(
    generator: BaseTextGenerator,
    query: str,
    history: Sequence[ChatTurn] = (),
) -> str:
    """Answer an election-process question in the context of the prior conversation."""
    prompt = build_chat_prompt(query, [(turn.user, turn.model) for turn in history])
    return await _generate(generator, prompt)

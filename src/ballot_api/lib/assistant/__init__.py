"""Assistant library: pluggable generative-text providers.

Public API:
    - BaseTextGenerator: Abstract provider interface
    - AssistantProviderError: Provider-level error
    - build_summary_prompt / build_chat_prompt: Prompt templates
    - get_generator: Provider factory/registry
"""

from typing import Any

from loguru import logger

from ballot_api.lib.assistant.base import AssistantProviderError, BaseTextGenerator
from ballot_api.lib.assistant.gemini import GeminiTextGenerator
from ballot_api.lib.assistant.prompts import (
    ELECTION_ASSISTANT_INSTRUCTIONS,
    build_chat_prompt,
    build_summary_prompt,
)

_GENERATORS: dict[str, type[BaseTextGenerator]] = {}


def get_generator(name: str, **kwargs: Any) -> BaseTextGenerator:
    """Get a text-generator instance by name.

    Args:
        name: Provider name (e.g., "gemini").
        **kwargs: Additional arguments forwarded to the provider constructor.

    Returns:
        An instance of the requested provider.

    Raises:
        ValueError: If the provider is not registered.
    """
    cls = _GENERATORS.get(name)
    if cls is None:
        msg = f"Unknown assistant provider: {name!r}. Available: {list(_GENERATORS.keys())}"
        raise ValueError(msg)
    return cls(**kwargs)


def register_generator(name: str, cls: type[BaseTextGenerator]) -> None:
    """Register a provider class in the global registry."""
    if name in _GENERATORS:
        logger.warning(f"Overwriting existing assistant provider {name!r}")
    _GENERATORS[name] = cls


register_generator("gemini", GeminiTextGenerator)

__all__ = [
    "ELECTION_ASSISTANT_INSTRUCTIONS",
    "AssistantProviderError",
    "BaseTextGenerator",
    "GeminiTextGenerator",
    "build_chat_prompt",
    "build_summary_prompt",
    "get_generator",
    "register_generator",
]

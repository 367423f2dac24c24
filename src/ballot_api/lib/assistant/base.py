"""Abstract base interface for generative-text providers."""

from abc import ABC, abstractmethod


class AssistantProviderError(Exception):
    """Raised when a provider experiences a transport or service error.

    Args:
        provider_name: Name of the failing provider.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the provider.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class BaseTextGenerator(ABC):
    """Abstract interface for generative-text providers.

    The assistant service only needs a single prompt-in, text-out call;
    prompts are built by :mod:`ballot_api.lib.assistant.prompts`.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique short name for this provider (e.g. 'gemini')."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Generate text for ``prompt``.

        Raises:
            AssistantProviderError: On transport failures, error responses,
                or responses without any text.
        """

    async def close(self) -> None:  # noqa: B027
        """Release any held resources."""

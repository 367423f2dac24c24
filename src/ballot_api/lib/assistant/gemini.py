"""Google Gemini ``generateContent`` provider."""

import json
from typing import Any

import httpx
from loguru import logger

from ballot_api.lib.assistant.base import AssistantProviderError, BaseTextGenerator

_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
_DEFAULT_MODEL = "gemini-2.0-flash"


class GeminiTextGenerator(BaseTextGenerator):
    """Generates text through the Gemini REST API.

    Args:
        api_key: Gemini API key, sent in the ``x-goog-api-key`` header.
        model: Model name (e.g. "gemini-2.0-flash").
        base_url: API root, without a trailing slash.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        model: str = _DEFAULT_MODEL,
        base_url: str = _DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self._model = model
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"x-goog-api-key": api_key},
            timeout=timeout,
        )

    @property
    def provider_name(self) -> str:
        return "gemini"

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` as a single user turn and return the concatenated reply text."""
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        data = await self._request(f"/models/{self._model}:generateContent", payload)
        return self._extract_text(data)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(path, json=payload)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Gemini API error: {} {} for {}",
                exc.response.status_code,
                exc.response.reason_phrase,
                path,
            )
            raise AssistantProviderError(
                self.provider_name,
                f"HTTP {exc.response.status_code}: {exc.response.reason_phrase}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Gemini request failed: {}", exc)
            raise AssistantProviderError(
                self.provider_name,
                f"Request failed: {exc}",
            ) from exc
        except json.JSONDecodeError as exc:
            logger.error("Gemini returned non-JSON response for {}", path)
            raise AssistantProviderError(
                self.provider_name,
                f"Invalid JSON response for {path}",
            ) from exc

    def _extract_text(self, data: dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            logger.warning("Gemini returned no candidates: {}", reason)
            raise AssistantProviderError(self.provider_name, f"Empty response ({reason})")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if not text:
            raise AssistantProviderError(self.provider_name, "Response contained no text")
        return text

"""
LLM Service for chat completions.
Talks to any OpenAI-compatible endpoint (OpenAI, Ollama's /v1 API).
"""

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from vs_chatbot.config.settings import LLMSettings
from vs_chatbot.core.exceptions import AnswerGenerationError

logger = structlog.get_logger(__name__)


@dataclass
class LLMResponse:
    """Response from LLM."""

    text: str
    tokens_used: int
    model: str


class LLMService:
    """
    Chat completion client over ``httpx.AsyncClient``.

    The client is created lazily and reused across calls. Subclasses for
    other wire formats override ``_headers``, ``_build_request`` and
    ``_parse_response``.
    """

    COMPLETION_PATH = "/chat/completions"

    def __init__(self, settings: LLMSettings, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self.model = settings.model
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.resolved_base_url,
                headers=self._headers(),
                timeout=float(self.settings.timeout_seconds),
            )
        return self._client

    def _build_request(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    def _parse_response(self, result: dict[str, Any]) -> tuple[str, int]:
        text = result["choices"][0]["message"]["content"]
        if not isinstance(text, str):
            raise TypeError("completion content is not text")
        return text, (result.get("usage") or {}).get("total_tokens", 0)

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Run one chat completion.

        Args:
            messages: OpenAI-style ``{"role", "content"}`` messages
            temperature: Overrides the configured temperature
            max_tokens: Overrides the configured token limit

        Returns:
            Generated text with usage metadata

        Raises:
            AnswerGenerationError: on transport errors or malformed replies
        """
        client = await self._get_client()
        payload = self._build_request(
            messages,
            temperature=self.settings.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.settings.max_tokens,
        )

        try:
            response = await client.post(self.COMPLETION_PATH, json=payload)
            response.raise_for_status()
            text, tokens = self._parse_response(response.json())
        except httpx.HTTPStatusError as e:
            logger.error("llm_api_error", provider=self.settings.provider, status=e.response.status_code, detail=str(e))
            raise AnswerGenerationError(f"LLM API returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("llm_request_failed", provider=self.settings.provider, error=str(e))
            raise AnswerGenerationError(f"LLM request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("llm_response_malformed", provider=self.settings.provider, error=str(e))
            raise AnswerGenerationError("Malformed LLM response") from e

        logger.info("llm_response_generated", model=self.model, response_length=len(text), tokens=tokens)

        return LLMResponse(text=text.strip(), tokens_used=tokens, model=self.model)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()

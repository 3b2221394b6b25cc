"""
Anthropic LLM Service.
Same interface as ``LLMService`` over the Anthropic Messages API.
"""

from typing import Any

from vs_chatbot.config.settings import LLMSettings
from vs_chatbot.services.llm.llm_service import LLMService

ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_ANTHROPIC_MODEL = "claude-3-opus-20240229"

# Messages API accepts temperature in [0, 1]
MAX_TEMPERATURE = 1.0


class AnthropicLLMService(LLMService):
    """Messages API client. System turns travel in the top-level ``system`` field."""

    COMPLETION_PATH = "/messages"

    def __init__(self, settings: LLMSettings, client=None) -> None:
        super().__init__(settings, client)
        if "model" not in settings.model_fields_set:
            self.model = DEFAULT_ANTHROPIC_MODEL

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.settings.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _build_request(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]:
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system" and m["content"])
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [m for m in messages if m["role"] != "system"],
            "temperature": min(temperature, MAX_TEMPERATURE),
            "max_tokens": max_tokens,
        }
        if system:
            payload["system"] = system
        return payload

    def _parse_response(self, result: dict[str, Any]) -> tuple[str, int]:
        blocks = [block["text"] for block in result["content"] if block.get("type") == "text"]
        text = "\n".join(blocks).strip()
        if not text:
            raise ValueError("Anthropic returned empty content")
        usage = result.get("usage") or {}
        return text, usage.get("input_tokens", 0) + usage.get("output_tokens", 0)

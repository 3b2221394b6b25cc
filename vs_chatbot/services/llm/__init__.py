"""LLM service module."""
from vs_chatbot.config.settings import LLMSettings
from vs_chatbot.services.llm.anthropic_service import AnthropicLLMService
from vs_chatbot.services.llm.llm_service import LLMResponse, LLMService


def create_llm_service(settings: LLMSettings) -> LLMService:
    """Build the client for the configured provider."""
    if settings.provider == "anthropic":
        return AnthropicLLMService(settings)
    return LLMService(settings)


__all__ = ["AnthropicLLMService", "LLMResponse", "LLMService", "create_llm_service"]

"""Error types raised across the chatbot core and its adapters."""


class ChatbotError(Exception):
    """Base class for all chatbot errors."""


class ConfigurationError(ChatbotError):
    """A required configuration value is missing or invalid."""


class GatewayError(ChatbotError):
    """The messaging service rejected or failed to receive a message."""


class AnswerGenerationError(ChatbotError):
    """The answer generator could not produce a reply."""

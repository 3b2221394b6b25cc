"""Answer generation service."""
from vs_chatbot.services.chatbot.chatbot_service import ChatbotService, NullRetriever

__all__ = ["ChatbotService", "NullRetriever"]

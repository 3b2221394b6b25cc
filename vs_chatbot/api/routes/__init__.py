"""API Routes module."""

from vs_chatbot.api.routes.chatbot import router as chatbot_router
from vs_chatbot.api.routes.webhooks import router as webhooks_router

__all__ = ["chatbot_router", "webhooks_router"]

"""
Chatbot API routes.
Direct access to the answer generator, for testing outside the channel.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vs_chatbot.api.dependencies import get_chatbot, get_session_store
from vs_chatbot.core.exceptions import AnswerGenerationError
from vs_chatbot.core.session import SessionStore
from vs_chatbot.services.chatbot import ChatbotService

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/chatbot", tags=["Chatbot"])


class AskRequest(BaseModel):
    """Question for the chatbot on behalf of a connection."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    connection_id: str = Field(..., min_length=1)
    user_input: str = Field(..., min_length=1)


class AskResponse(BaseModel):
    answer: str


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    chatbot: ChatbotService = Depends(get_chatbot),
    session_store: SessionStore = Depends(get_session_store),
) -> AskResponse:
    """Answer a question using the connection's session and history."""
    session = await session_store.get_or_create(request.connection_id)
    try:
        answer = await chatbot.generate(request.user_input, session)
    except AnswerGenerationError as e:
        logger.error("ask_failed", connection_id=request.connection_id, error=str(e))
        raise HTTPException(status_code=502, detail="Answer generation failed")
    return AskResponse(answer=answer)

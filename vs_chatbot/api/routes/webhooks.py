"""
Webhook routes for the messaging service.
Translate VS Agent callbacks into inbound events for the orchestrator.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from vs_chatbot.api.dependencies import get_orchestrator
from vs_chatbot.core.orchestrator import DialogOrchestrator
from vs_chatbot.models import BaseEvent, UnknownEvent, parse_event

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["Webhooks"])

# VS Agent message type -> inbound event type
WIRE_MESSAGE_TYPES = {
    "text": "text",
    "contextual-menu-select": "menu_select",
    "profile": "profile",
    "identity-proof-submit": "proof_submit",
}

# VS Agent connection state -> inbound event type
WIRE_CONNECTION_STATES = {
    "completed": "connection_open",
    "terminated": "connection_close",
}


class MessageReceivedRequest(BaseModel):
    """Message callback body."""

    message: dict[str, Any]


class ConnectionStateUpdatedRequest(BaseModel):
    """Connection state callback body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    connection_id: str = Field(..., min_length=1)
    state: str


class WebhookResponse(BaseModel):
    status: str


def message_to_event(message: dict[str, Any]) -> BaseEvent:
    """Build an inbound event from a VS Agent message."""
    wire_type = message.get("type")
    connection_id = message.get("connectionId")
    event_type = WIRE_MESSAGE_TYPES.get(wire_type) if isinstance(wire_type, str) else None

    if event_type is None:
        return UnknownEvent(
            connection_id=connection_id,
            raw_type=wire_type if isinstance(wire_type, str) else None,
        )
    return parse_event({"type": event_type, "connectionId": connection_id, "payload": message})


@router.post("/message-received", response_model=WebhookResponse)
async def message_received(
    request: MessageReceivedRequest,
    orchestrator: DialogOrchestrator = Depends(get_orchestrator),
) -> WebhookResponse:
    """Handle an inbound message from a connection."""
    try:
        event = message_to_event(request.message)
    except ValidationError as e:
        logger.warning("message_rejected", error=str(e))
        raise HTTPException(status_code=422, detail="Message has no connectionId")

    await orchestrator.handle_event(event)
    return WebhookResponse(status="accepted")


@router.post("/connection-state-updated", response_model=WebhookResponse)
async def connection_state_updated(
    request: ConnectionStateUpdatedRequest,
    orchestrator: DialogOrchestrator = Depends(get_orchestrator),
) -> WebhookResponse:
    """Handle connection lifecycle changes."""
    event_type = WIRE_CONNECTION_STATES.get(request.state)
    if event_type is None:
        logger.debug("connection_state_ignored", connection_id=request.connection_id, state=request.state)
        return WebhookResponse(status="ignored")

    event = parse_event({"type": event_type, "connectionId": request.connection_id})
    await orchestrator.handle_event(event)
    return WebhookResponse(status="accepted")

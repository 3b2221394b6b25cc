"""
Inbound channel events.

Every event the orchestrator understands is one member of the closed
``InboundEvent`` union, discriminated by ``type``. Anything else is
carried as an ``UnknownEvent``.
"""

from typing import Annotated, Any, Literal, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

logger = structlog.get_logger(__name__)


class EventModel(BaseModel):
    """Base for event payloads; accepts camelCase wire keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class BaseEvent(EventModel):
    connection_id: str = Field(..., min_length=1)


class TextEvent(BaseEvent):
    type: Literal["text"] = "text"
    content: str | None = None


class MenuSelectEvent(BaseEvent):
    type: Literal["menu_select"] = "menu_select"
    selection_id: str | None = None


class ProfileEvent(BaseEvent):
    type: Literal["profile"] = "profile"
    preferred_language: str | None = None


class ProofClaim(EventModel):
    name: str
    value: str | None = None


class SubmittedProofItem(EventModel):
    """One item of a credential proof submission."""

    id: str | None = None
    type: str | None = None
    error_code: str | None = None
    claims: list[ProofClaim] | None = None

    def claim(self, name: str) -> str | None:
        for claim in self.claims or []:
            if claim.name == name:
                return claim.value
        return None


class ProofSubmitEvent(BaseEvent):
    type: Literal["proof_submit"] = "proof_submit"
    submitted_proof_items: list[SubmittedProofItem] | None = None

    @property
    def first_item(self) -> SubmittedProofItem | None:
        return self.submitted_proof_items[0] if self.submitted_proof_items else None


class ConnectionOpenEvent(BaseEvent):
    type: Literal["connection_open"] = "connection_open"


class ConnectionCloseEvent(BaseEvent):
    type: Literal["connection_close"] = "connection_close"


class UnknownEvent(BaseEvent):
    """Event of a type this core does not handle."""

    type: Literal["unknown"] = "unknown"
    raw_type: str | None = None


InboundEvent = Annotated[
    Union[
        TextEvent,
        MenuSelectEvent,
        ProfileEvent,
        ProofSubmitEvent,
        ConnectionOpenEvent,
        ConnectionCloseEvent,
        UnknownEvent,
    ],
    Field(discriminator="type"),
]

EVENT_TYPES: dict[str, type[BaseEvent]] = {
    "text": TextEvent,
    "menu_select": MenuSelectEvent,
    "profile": ProfileEvent,
    "proof_submit": ProofSubmitEvent,
    "connection_open": ConnectionOpenEvent,
    "connection_close": ConnectionCloseEvent,
}

_event_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_event(data: dict[str, Any]) -> BaseEvent:
    """
    Build an event from a tagged ``{type, connectionId, payload}`` mapping.

    Unknown types become ``UnknownEvent``. A payload that does not fit its
    event type is dropped and the event is built without it, so the
    orchestrator falls back to its per-state default handling.

    Raises:
        ValidationError: if the connection id is missing or empty.
    """
    event_type = data.get("type")
    connection_id = data.get("connectionId", data.get("connection_id"))
    payload = data.get("payload") or {}

    event_cls = EVENT_TYPES.get(event_type) if isinstance(event_type, str) else None
    if event_cls is None:
        return UnknownEvent(
            connection_id=connection_id,
            raw_type=event_type if isinstance(event_type, str) else None,
        )

    if not isinstance(payload, dict):
        payload = {}

    try:
        return _event_adapter.validate_python(
            {**payload, "type": event_type, "connectionId": connection_id}
        )
    except ValidationError as e:
        logger.warning(
            "malformed_event_payload",
            event_type=event_type,
            connection_id=connection_id,
            error=str(e),
        )
        return event_cls(connection_id=connection_id)

import pytest
from pydantic import ValidationError

from vs_chatbot.models import (
    ConnectionCloseEvent,
    MenuSelectEvent,
    ProfileEvent,
    ProofSubmitEvent,
    TextEvent,
    UnknownEvent,
    parse_event,
)


def test_parse_text_event():
    event = parse_event({"type": "text", "connectionId": "c1", "payload": {"content": "hi"}})

    assert isinstance(event, TextEvent)
    assert event.connection_id == "c1"
    assert event.content == "hi"


def test_parse_menu_and_profile_events():
    menu = parse_event({"type": "menu_select", "connectionId": "c1", "payload": {"selectionId": "logout"}})
    profile = parse_event({"type": "profile", "connectionId": "c1", "payload": {"preferredLanguage": "fr"}})

    assert isinstance(menu, MenuSelectEvent) and menu.selection_id == "logout"
    assert isinstance(profile, ProfileEvent) and profile.preferred_language == "fr"


def test_parse_proof_submission():
    event = parse_event({
        "type": "proof_submit",
        "connectionId": "c1",
        "payload": {
            "submittedProofItems": [
                {"id": "1", "type": "verifiable-credential",
                 "claims": [{"name": "firstName", "value": "Ada"}]},
            ]
        },
    })

    assert isinstance(event, ProofSubmitEvent)
    assert event.first_item.claim("firstName") == "Ada"
    assert event.first_item.claim("lastName") is None
    assert event.first_item.error_code is None


def test_event_without_payload():
    event = parse_event({"type": "connection_close", "connectionId": "c1"})

    assert isinstance(event, ConnectionCloseEvent)


def test_unknown_type_is_preserved():
    event = parse_event({"type": "media", "connectionId": "c1", "payload": {"url": "x"}})

    assert isinstance(event, UnknownEvent)
    assert event.raw_type == "media"


def test_malformed_payload_is_dropped():
    event = parse_event({
        "type": "proof_submit",
        "connectionId": "c1",
        "payload": {"submittedProofItems": "not-a-list"},
    })

    assert isinstance(event, ProofSubmitEvent)
    assert event.first_item is None


def test_payload_cannot_override_type():
    event = parse_event({"type": "text", "connectionId": "c1", "payload": {"type": "profile", "content": "x"}})

    assert isinstance(event, TextEvent)


@pytest.mark.parametrize("connection_id", [None, ""])
def test_connection_id_is_required(connection_id):
    with pytest.raises(ValidationError):
        parse_event({"type": "text", "connectionId": connection_id, "payload": {"content": "x"}})

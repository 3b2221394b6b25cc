import asyncio

import pytest
from fastapi.testclient import TestClient

from vs_chatbot.api.app import create_app
from vs_chatbot.api.dependencies import Components
from vs_chatbot.config import Settings
from vs_chatbot.core.exceptions import AnswerGenerationError
from vs_chatbot.models import SessionState
from vs_chatbot.services.chatbot import ChatbotService
from vs_chatbot.services.llm.llm_service import LLMResponse


@pytest.fixture
def llm(mocker):
    llm = mocker.AsyncMock()
    llm.complete.return_value = LLMResponse(text="An answer.", tokens_used=5, model="test")
    return llm


@pytest.fixture
def components(orchestrator, session_store, memory, content, gateway, llm):
    return Components(
        session_store=session_store,
        memory=memory,
        content=content,
        chatbot=ChatbotService(llm=llm, content=content, memory=memory),
        gateway=gateway,
        orchestrator=orchestrator,
        llm=llm,
    )


@pytest.fixture
def client(components):
    app = create_app(settings=Settings(), components=components)
    with TestClient(app) as client:
        yield client


def run(coro):
    return asyncio.run(coro)


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/health/live").json() == {"status": "alive"}
    ready = client.get("/health/ready").json()
    assert ready["status"] == "ready"
    assert ready["checks"] == {"api": True, "components": True}


def test_metrics_endpoint(client):
    client.get("/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "vs_chatbot_requests_total" in response.text


def test_text_message_is_answered(client, gateway, answer_generator):
    response = client.post(
        "/message-received",
        json={"message": {"type": "text", "connectionId": "c1", "content": "hello"}},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "accepted"}
    assert answer_generator.calls == [("hello", "c1")]
    assert gateway.texts == ["echo: hello"]
    assert "X-Request-ID" in response.headers


def test_menu_select_starts_authentication(client, gateway):
    client.post(
        "/message-received",
        json={"message": {"type": "contextual-menu-select", "connectionId": "c1", "selectionId": "authenticate"}},
    )

    assert gateway.of_kind("proof_request") == ["cred-def-1"]


def test_proof_submission_authenticates(client, gateway, session_store):
    client.post(
        "/message-received",
        json={"message": {"type": "contextual-menu-select", "connectionId": "c1", "selectionId": "authenticate"}},
    )
    client.post(
        "/message-received",
        json={
            "message": {
                "type": "identity-proof-submit",
                "connectionId": "c1",
                "submittedProofItems": [
                    {"id": "1", "type": "verifiable-credential",
                     "claims": [{"name": "firstName", "value": "Ada"}]},
                ],
            }
        },
    )

    session = run(session_store.get("c1"))
    assert session.is_authenticated is True
    assert session.user_name == "Ada"
    assert gateway.menus[-1]["options"] == ["logout"]


def test_profile_message_sets_language(client, session_store):
    client.post(
        "/message-received",
        json={"message": {"type": "profile", "connectionId": "c1", "preferredLanguage": "fr"}},
    )

    assert run(session_store.get("c1")).lang == "fr"


def test_unknown_message_type_is_accepted(client, gateway):
    response = client.post(
        "/message-received",
        json={"message": {"type": "media", "connectionId": "c1"}},
    )

    assert response.json() == {"status": "accepted"}
    assert gateway.texts == []
    assert len(gateway.menus) == 1


def test_message_without_connection_is_rejected(client, gateway):
    response = client.post("/message-received", json={"message": {"type": "text", "content": "hi"}})

    assert response.status_code == 422
    assert gateway.sent == []


def test_connection_lifecycle(client, session_store, stat_sink):
    opened = client.post("/connection-state-updated", json={"connectionId": "c1", "state": "completed"})
    closed = client.post("/connection-state-updated", json={"connectionId": "c1", "state": "terminated"})

    assert opened.json() == closed.json() == {"status": "accepted"}
    assert len(stat_sink.events) == 1
    assert run(session_store.get("c1")).state == SessionState.START


def test_other_connection_states_are_ignored(client, session_store):
    response = client.post("/connection-state-updated", json={"connectionId": "c1", "state": "request-sent"})

    assert response.json() == {"status": "ignored"}
    assert run(session_store.get("c1")) is None


def test_chatbot_ask(client, llm, session_store):
    response = client.post("/chatbot/ask", json={"connectionId": "c1", "userInput": "What is this?"})

    assert response.status_code == 200
    assert response.json() == {"answer": "An answer."}
    llm.complete.assert_awaited_once()


def test_chatbot_ask_reports_generation_failure(client, llm):
    llm.complete.side_effect = AnswerGenerationError("down")

    response = client.post("/chatbot/ask", json={"connectionId": "c1", "userInput": "hi"})

    assert response.status_code == 502


def test_chatbot_ask_validates_input(client):
    response = client.post("/chatbot/ask", json={"connectionId": "c1", "userInput": ""})

    assert response.status_code == 422

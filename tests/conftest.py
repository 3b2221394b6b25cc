"""Shared fixtures: in-memory collaborators and recording fakes."""

import pytest

from vs_chatbot.core.content import ContentResolver
from vs_chatbot.core.memory import InMemoryBackend
from vs_chatbot.core.orchestrator import DialogOrchestrator
from vs_chatbot.core.session import InMemorySessionStore


class RecordingGateway:
    """Messaging gateway that keeps every outbound message."""

    def __init__(self):
        self.sent = []

    async def send_text(self, connection_id, text):
        self.sent.append(("text", connection_id, text))

    async def send_menu_update(self, connection_id, title, options):
        self.sent.append(("menu", connection_id, {"title": title, "options": [o.id for o in options]}))

    async def send_proof_request(self, connection_id, credential_definition_id):
        self.sent.append(("proof_request", connection_id, credential_definition_id))

    def of_kind(self, kind):
        return [payload for sent_kind, _, payload in self.sent if sent_kind == kind]

    @property
    def texts(self):
        return self.of_kind("text")

    @property
    def menus(self):
        return self.of_kind("menu")


class RecordingStatSink:
    def __init__(self):
        self.events = []

    async def record_event(self, kpi, connection_id):
        self.events.append((kpi, connection_id))


class EchoAnswerGenerator:
    """Answers with the question itself; can be told to fail."""

    def __init__(self):
        self.calls = []
        self.error = None

    async def generate(self, user_input, session):
        self.calls.append((user_input, session.connection_id))
        if self.error:
            raise self.error
        return f"echo: {user_input}"


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def stat_sink():
    return RecordingStatSink()


@pytest.fixture
def answer_generator():
    return EchoAnswerGenerator()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def memory():
    return InMemoryBackend(window=8)


@pytest.fixture
def content():
    return ContentResolver(credential_definition_id="cred-def-1")


@pytest.fixture
def orchestrator(session_store, memory, content, answer_generator, gateway, stat_sink):
    return DialogOrchestrator(
        session_store=session_store,
        memory=memory,
        content=content,
        answer_generator=answer_generator,
        gateway=gateway,
        stat_sink=stat_sink,
    )

"""
Collaborator interfaces consumed by the dialog orchestrator.

Structural protocols: any object with matching methods plugs in.
"""

from enum import Enum
from typing import Protocol, Sequence, runtime_checkable

from vs_chatbot.models import MenuOption, Session


class StatKpi(str, Enum):
    """KPI events reported to the stat sink."""

    USER_CONNECTED = "USER_CONNECTED"


@runtime_checkable
class AnswerGenerator(Protocol):
    """Produce a reply to free text. May raise."""

    async def generate(self, user_input: str, session: Session) -> str: ...


@runtime_checkable
class MessagingGateway(Protocol):
    """Outbound channel. Delivery guarantees belong to the implementation."""

    async def send_text(self, connection_id: str, text: str) -> None: ...

    async def send_menu_update(
        self,
        connection_id: str,
        title: str,
        options: Sequence[MenuOption],
    ) -> None: ...

    async def send_proof_request(self, connection_id: str, credential_definition_id: str) -> None: ...


@runtime_checkable
class StatSink(Protocol):
    """Best-effort KPI recording."""

    async def record_event(self, kpi: StatKpi, connection_id: str) -> None: ...


@runtime_checkable
class Retriever(Protocol):
    """Return context passages relevant to a query."""

    async def retrieve(self, query: str) -> list[str]: ...

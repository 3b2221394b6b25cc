"""
VS Agent client - outbound messages to the messaging service.
Posts JSON messages to the admin API of the agent that owns the connections.
"""

from datetime import datetime, timezone
from typing import Any, Sequence

import httpx
import structlog

from vs_chatbot.core.exceptions import GatewayError
from vs_chatbot.models import MenuOption

logger = structlog.get_logger(__name__)


class VsAgentGateway:
    """Messaging gateway backed by the VS Agent ``/v1/message`` endpoint."""

    MESSAGE_PATH = "/v1/message"

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout_seconds
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def _send(self, message: dict[str, Any]) -> None:
        client = await self._get_client()
        try:
            response = await client.post(self.MESSAGE_PATH, json=message)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "vs_agent_message_rejected",
                message_type=message["type"],
                status=e.response.status_code,
            )
            raise GatewayError(f"{message['type']} rejected with {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("vs_agent_request_failed", message_type=message["type"], error=str(e))
            raise GatewayError(f"{message['type']} could not be sent: {e}") from e

        logger.debug("vs_agent_message_sent", message_type=message["type"])

    async def send_text(self, connection_id: str, text: str) -> None:
        await self._send({"type": "text", "connectionId": connection_id, "content": text})

    async def send_menu_update(
        self,
        connection_id: str,
        title: str,
        options: Sequence[MenuOption],
    ) -> None:
        await self._send({
            "type": "contextual-menu-update",
            "connectionId": connection_id,
            "title": title,
            "options": [option.model_dump() for option in options],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def send_proof_request(self, connection_id: str, credential_definition_id: str) -> None:
        await self._send({
            "type": "identity-proof-request",
            "connectionId": connection_id,
            "requestedProofItems": [
                {
                    "id": "1",
                    "type": "verifiable-credential",
                    "credentialDefinitionId": credential_definition_id,
                }
            ],
        })

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()

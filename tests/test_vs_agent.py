import json

import httpx
import pytest
from prometheus_client import CollectorRegistry, Counter

from vs_chatbot.core.exceptions import GatewayError
from vs_chatbot.core.ports import StatKpi
from vs_chatbot.models import MenuOption
from vs_chatbot.services.vs_agent import PrometheusStatSink, VsAgentGateway


@pytest.fixture
def sent():
    return []


@pytest.fixture
def gateway(sent):
    def handler(request):
        sent.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"id": "msg-1"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://agent.test")
    return VsAgentGateway("http://agent.test", client=client)


async def test_send_text(gateway, sent):
    await gateway.send_text("c1", "hello")

    assert sent == [("/v1/message", {"type": "text", "connectionId": "c1", "content": "hello"})]


async def test_send_menu_update(gateway, sent):
    await gateway.send_menu_update("c1", "Welcome!", [MenuOption(id="logout", title="Logout")])

    path, body = sent[0]
    assert path == "/v1/message"
    assert body["type"] == "contextual-menu-update"
    assert body["connectionId"] == "c1"
    assert body["title"] == "Welcome!"
    assert body["options"] == [{"id": "logout", "title": "Logout"}]
    assert "timestamp" in body


async def test_send_proof_request(gateway, sent):
    await gateway.send_proof_request("c1", "cred-def-1")

    _, body = sent[0]
    assert body == {
        "type": "identity-proof-request",
        "connectionId": "c1",
        "requestedProofItems": [
            {"id": "1", "type": "verifiable-credential", "credentialDefinitionId": "cred-def-1"}
        ],
    }


async def test_rejected_message_raises_gateway_error():
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(404)),
        base_url="http://agent.test",
    )
    gateway = VsAgentGateway("http://agent.test", client=client)

    with pytest.raises(GatewayError, match="404"):
        await gateway.send_text("c1", "hello")


async def test_unreachable_agent_raises_gateway_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://agent.test")
    gateway = VsAgentGateway("http://agent.test", client=client)

    with pytest.raises(GatewayError):
        await gateway.send_text("c1", "hello")


async def test_stat_sink_counts_per_kpi():
    registry = CollectorRegistry()
    counter = Counter("test_kpi_events_total", "test", ["kpi"], registry=registry)
    sink = PrometheusStatSink(counter=counter)

    await sink.record_event(StatKpi.USER_CONNECTED, "c1")
    await sink.record_event(StatKpi.USER_CONNECTED, "c2")

    assert registry.get_sample_value("test_kpi_events_total", {"kpi": "USER_CONNECTED"}) == 2.0

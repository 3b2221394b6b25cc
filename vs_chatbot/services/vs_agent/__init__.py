"""VS Agent messaging integration."""
from vs_chatbot.services.vs_agent.client import VsAgentGateway
from vs_chatbot.services.vs_agent.stats import PrometheusStatSink

__all__ = ["PrometheusStatSink", "VsAgentGateway"]

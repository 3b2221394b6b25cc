"""Configuration module."""

from vs_chatbot.config.agent_pack import AgentPack, AgentPackLoadResult, load_agent_pack
from vs_chatbot.config.settings import Settings, get_settings

__all__ = [
    "AgentPack",
    "AgentPackLoadResult",
    "Settings",
    "get_settings",
    "load_agent_pack",
]

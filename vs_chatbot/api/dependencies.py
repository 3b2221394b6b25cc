"""
Component wiring for the API process.

Builds the orchestrator and its collaborators once from settings and the
agent pack. Environment settings win over agent pack values; the pack only
fills what the environment leaves unset.
"""

from dataclasses import dataclass

import structlog
from fastapi import Request

from vs_chatbot.config import AgentPack, Settings, load_agent_pack
from vs_chatbot.config.settings import LLMSettings
from vs_chatbot.core.content import ContentResolver
from vs_chatbot.core.memory import ConversationMemory, create_conversation_memory
from vs_chatbot.core.orchestrator import DialogOrchestrator
from vs_chatbot.core.session import SessionStore, create_session_store
from vs_chatbot.services.chatbot import ChatbotService
from vs_chatbot.services.llm import LLMService, create_llm_service
from vs_chatbot.services.vs_agent import PrometheusStatSink, VsAgentGateway

logger = structlog.get_logger(__name__)


@dataclass
class Components:
    """Long-lived objects shared by all requests."""

    session_store: SessionStore
    memory: ConversationMemory
    content: ContentResolver
    chatbot: ChatbotService
    gateway: VsAgentGateway
    orchestrator: DialogOrchestrator
    llm: LLMService

    async def close(self) -> None:
        await self.memory.close()
        await self.gateway.close()
        await self.llm.close()


def _pack_int(value: int | str | None, fallback: int) -> int:
    try:
        return int(value) if value is not None and str(value).strip() else fallback
    except ValueError:
        logger.warning("agent_pack_invalid_number", value=value)
        return fallback


def _memory_options(settings: Settings, pack: AgentPack | None) -> tuple[str, int, str]:
    backend, window, redis_url = settings.memory.backend, settings.memory.window, settings.redis.url
    pack_memory = pack.memory if pack else None
    if pack_memory:
        explicit = settings.memory.model_fields_set
        if "backend" not in explicit and pack_memory.backend in ("memory", "redis"):
            backend = pack_memory.backend
        if "window" not in explicit:
            window = max(1, _pack_int(pack_memory.window, window))
        if pack_memory.redis_url:
            redis_url = pack_memory.redis_url
    return backend, window, redis_url


def _llm_settings(settings: Settings, pack: AgentPack | None) -> LLMSettings:
    pack_llm = pack.llm if pack else None
    if not pack_llm:
        return settings.llm
    explicit = settings.llm.model_fields_set
    updates = {}
    if pack_llm.model and "model" not in explicit:
        updates["model"] = pack_llm.model
    if pack_llm.provider in ("openai", "ollama", "anthropic") and "provider" not in explicit:
        updates["provider"] = pack_llm.provider
    if pack_llm.max_tokens is not None and "max_tokens" not in explicit:
        updates["max_tokens"] = _pack_int(pack_llm.max_tokens, settings.llm.max_tokens)
    return settings.llm.model_copy(update=updates)


async def build_components(settings: Settings) -> Components:
    """Load the agent pack and construct every collaborator."""
    result = load_agent_pack(settings.agent.pack_path)
    for warning in result.warnings:
        logger.warning("agent_pack_warning", detail=warning)
    pack = result.pack

    llm_settings = _llm_settings(settings, pack)
    content = ContentResolver(
        pack=pack,
        credential_definition_id=settings.agent.credential_definition_id,
        agent_prompt=llm_settings.agent_prompt,
    )

    session_store = create_session_store(settings.database.backend, settings.database.path)
    await session_store.initialize()

    backend, window, redis_url = _memory_options(settings, pack)
    memory = create_conversation_memory(backend, window, redis_url, settings.memory.ttl_seconds)

    llm = create_llm_service(llm_settings)
    chatbot = ChatbotService(llm=llm, content=content, memory=memory)
    gateway = VsAgentGateway(settings.vs_agent.admin_url, settings.vs_agent.timeout_seconds)

    orchestrator = DialogOrchestrator(
        session_store=session_store,
        memory=memory,
        content=content,
        answer_generator=chatbot,
        gateway=gateway,
        stat_sink=PrometheusStatSink(),
    )

    logger.info(
        "components_initialized",
        session_store=settings.database.backend,
        memory_backend=backend,
        memory_window=window,
        llm_provider=llm_settings.provider,
        agent_pack=str(result.manifest_path) if result.manifest_path else None,
    )
    return Components(
        session_store=session_store,
        memory=memory,
        content=content,
        chatbot=chatbot,
        gateway=gateway,
        orchestrator=orchestrator,
        llm=llm,
    )


def get_orchestrator(request: Request) -> DialogOrchestrator:
    return request.app.state.components.orchestrator


def get_chatbot(request: Request) -> ChatbotService:
    return request.app.state.components.chatbot


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.components.session_store

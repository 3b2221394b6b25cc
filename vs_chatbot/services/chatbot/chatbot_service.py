"""
Chatbot service - answers free-text questions with the LLM.
Combines retrieved context, recent conversation turns and the localized
agent prompt into one chat completion.
"""

import structlog

from vs_chatbot.core.content import ContentResolver
from vs_chatbot.core.memory import ConversationMemory
from vs_chatbot.core.ports import Retriever
from vs_chatbot.models import ChatRole, Session
from vs_chatbot.services.llm import LLMService
from vs_chatbot.utils.language import detect_language

logger = structlog.get_logger(__name__)

AUTHENTICATED_NOTE = "The current user is authenticated."
UNAUTHENTICATED_NOTE = (
    "The current user is NOT authenticated. Ask them to authenticate from the menu "
    "before helping with anything that requires it."
)


class NullRetriever:
    """Retriever used when no knowledge base is configured."""

    async def retrieve(self, query: str) -> list[str]:
        return []


class ChatbotService:
    """Answer generator backed by the configured LLM provider."""

    def __init__(
        self,
        llm: LLMService,
        content: ContentResolver,
        memory: ConversationMemory,
        retriever: Retriever | None = None,
    ) -> None:
        self.llm = llm
        self.content = content
        self.memory = memory
        self.retriever = retriever or NullRetriever()

    async def generate(self, user_input: str, session: Session) -> str:
        """
        Generate an answer and record the exchange in conversation memory.

        Raises:
            AnswerGenerationError: if the LLM call fails
        """
        lang = session.lang or detect_language(user_input)
        passages = await self.retriever.retrieve(user_input)
        context = "\n\n".join(passages)

        messages = self._build_messages(
            session=session,
            lang=lang,
            history=await self.memory.get_history(session.connection_id),
            prompt=self.content.build_prompt(
                lang,
                context=context,
                question=user_input,
                user_name=session.user_name or None,
            ),
        )

        response = await self.llm.complete(messages)

        await self.memory.add_message(session.connection_id, ChatRole.USER, user_input)
        await self.memory.add_message(session.connection_id, ChatRole.ASSISTANT, response.text)

        logger.info(
            "answer_generated",
            connection_id=session.connection_id,
            lang=lang,
            context_passages=len(passages),
            history_turns=len(messages) - 2,
            tokens=response.tokens_used,
        )
        return response.text

    def _build_messages(self, session: Session, lang: str, history: list, prompt: str) -> list[dict[str, str]]:
        system_prompt = self.content.get_system_prompt(lang)
        auth_note = AUTHENTICATED_NOTE if session.is_authenticated else UNAUTHENTICATED_NOTE
        system = "\n\n".join(part for part in (system_prompt, auth_note) if part)

        messages = [{"role": "system", "content": system}]
        messages.extend({"role": turn.role.value, "content": turn.content} for turn in history)
        messages.append({"role": "user", "content": prompt})
        return messages

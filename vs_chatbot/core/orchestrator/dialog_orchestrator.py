"""
Dialog Orchestrator - Central state machine for conversation flow.
Consumes inbound channel events, drives session state transitions,
and emits replies, proof requests and contextual menus.
"""

import structlog

from vs_chatbot.core.content import ContentResolver
from vs_chatbot.core.exceptions import ConfigurationError
from vs_chatbot.core.memory import ConversationMemory
from vs_chatbot.core.orchestrator.locks import KeyedLock
from vs_chatbot.core.ports import AnswerGenerator, MessagingGateway, StatKpi, StatSink
from vs_chatbot.core.session import SessionStore
from vs_chatbot.models import (
    BaseEvent,
    ConnectionCloseEvent,
    ConnectionOpenEvent,
    MenuAction,
    MenuOption,
    MenuSelectEvent,
    ProfileEvent,
    ProofSubmitEvent,
    Session,
    SessionState,
    SubmittedProofItem,
    TextEvent,
)

logger = structlog.get_logger(__name__)

VERIFIABLE_CREDENTIAL = "verifiable-credential"


class DialogOrchestrator:
    """
    Per-connection dialog state machine.

    For each inbound event:
    1. Serialize on the connection id
    2. Load or create the session
    3. Dispatch on event type and session state
    4. Send the recomputed contextual menu
    5. Persist the session

    Failures in step 3 become a single localized error message; steps 4
    and 5 always run. If step 2 fails the error and the menu go out for an
    unsaved session.
    """

    def __init__(
        self,
        session_store: SessionStore,
        memory: ConversationMemory,
        content: ContentResolver,
        answer_generator: AnswerGenerator,
        gateway: MessagingGateway,
        stat_sink: StatSink | None = None,
    ) -> None:
        self.session_store = session_store
        self.memory = memory
        self.content = content
        self.answer_generator = answer_generator
        self.gateway = gateway
        self.stat_sink = stat_sink

        self._menu_items = content.get_menu_items()
        self._menu_actions = {item.id: item.action for item in self._menu_items if item.action}
        self._welcome_flow = content.get_welcome_flow_config()
        self._auth_flow = content.get_auth_flow_config()

        self._locks = KeyedLock()

    async def handle_event(self, event: BaseEvent) -> None:
        """
        Process one inbound event to completion.

        Events for the same connection run one at a time, in arrival order
        of lock acquisition; other connections are not blocked. Nothing
        raised while handling the event escapes this method.
        """
        async with self._locks.acquire(event.connection_id):
            with structlog.contextvars.bound_contextvars(
                connection_id=event.connection_id,
                event_type=event.type,
            ):
                await self._process(event)

    async def _process(self, event: BaseEvent) -> None:
        try:
            session = await self.session_store.get_or_create(event.connection_id)
        except Exception:
            logger.exception("session_load_failed")
            fallback = Session(connection_id=event.connection_id)
            await self._send_generic_error(fallback)
            await self._send_contextual_menu(fallback)
            return

        logger.debug("event_received", state=session.state.value)

        try:
            await self._dispatch(event, session)
        except Exception as e:
            logger.error("event_processing_failed", error=str(e), exc_info=True)
            await self._send_generic_error(session)

        await self._send_contextual_menu(session)

        try:
            await self.session_store.save(session)
        except Exception:
            logger.exception("session_persist_failed")

    async def _dispatch(self, event: BaseEvent, session: Session) -> None:
        # Profile and menu events that arrive mid-proof still get the waiting reminder
        was_waiting = session.state == SessionState.AUTH

        if isinstance(event, ConnectionOpenEvent):
            await self._record_stat(StatKpi.USER_CONNECTED, session)
        elif isinstance(event, ConnectionCloseEvent):
            await self._purge_user_data(session)
        elif isinstance(event, ProfileEvent):
            await self._handle_profile(event, session)
            if was_waiting:
                await self._send_localized(session, "WAITING_CREDENTIAL")
        elif isinstance(event, MenuSelectEvent):
            await self._handle_menu_selection(event, session)
            if was_waiting:
                await self._send_localized(session, "WAITING_CREDENTIAL")
        elif isinstance(event, TextEvent):
            await self._handle_text(event, session)
        elif isinstance(event, ProofSubmitEvent):
            await self._handle_proof_submission(event, session)
        else:
            logger.debug("event_ignored")

    # Event handlers

    async def _handle_profile(self, event: ProfileEvent, session: Session) -> None:
        if event.preferred_language:
            session.lang = event.preferred_language

        if self._welcome_flow.enabled and self._welcome_flow.send_on_profile:
            welcome = self.content.get_welcome_message(session.lang, self._welcome_flow.template_key)
            await self.gateway.send_text(session.connection_id, welcome)

    async def _handle_menu_selection(self, event: MenuSelectEvent, session: Session) -> None:
        selection_id = event.selection_id
        action = self._menu_actions.get(selection_id) if selection_id else None
        if not action:
            logger.warning("invalid_menu_selection", selection_id=selection_id)
            return

        if session.state != SessionState.CHAT:
            logger.info("menu_selection_ignored", selection_id=selection_id, state=session.state.value)
            return

        if action == MenuAction.AUTHENTICATE.value:
            await self._start_authentication(session)
        elif action == MenuAction.LOGOUT.value:
            await self._logout(session)
        else:
            logger.info("menu_action_not_handled", selection_id=selection_id, action=action)

    async def _handle_text(self, event: TextEvent, session: Session) -> None:
        if session.state == SessionState.AUTH:
            await self._send_localized(session, "WAITING_CREDENTIAL")
            return
        if session.state != SessionState.CHAT:
            logger.info("text_ignored", state=session.state.value)
            return

        text = (event.content or "").strip()
        if not text:
            return

        answer = await self.answer_generator.generate(text, session)
        logger.debug("answer_generated", answer_length=len(answer))
        await self.gateway.send_text(session.connection_id, answer)

    async def _handle_proof_submission(self, event: ProofSubmitEvent, session: Session) -> None:
        if session.state != SessionState.AUTH:
            logger.info("proof_submission_ignored", state=session.state.value)
            return

        item = event.first_item
        if item is not None and self._is_credential_item(item) and not item.error_code:
            session.mark_authenticated(self._user_name_from_claims(item))
            await self.session_store.save(session)
            logger.info("user_authenticated", has_name=bool(session.user_name))

            if session.user_name:
                message = self.content.get_string(session.lang, "AUTH_SUCCESS_NAME").replace(
                    "{name}", session.user_name
                )
            else:
                message = self.content.get_string(session.lang, "AUTH_SUCCESS")
            await self.gateway.send_text(session.connection_id, message)
        elif item is not None and item.error_code:
            logger.warning("proof_submission_failed", error_code=item.error_code)
            prefix = self.content.get_string(session.lang, "AUTH_ERROR")
            await self.gateway.send_text(session.connection_id, f"{prefix}: {item.error_code}")
        else:
            await self._send_localized(session, "WAITING_CREDENTIAL")

    # Flows

    async def _start_authentication(self, session: Session) -> None:
        if not self._auth_flow.enabled:
            logger.info("authentication_disabled")
            return

        credential_definition_id = self._auth_flow.credential_definition_id
        if not credential_definition_id:
            raise ConfigurationError("Missing config: credential_definition_id")

        await self.gateway.send_proof_request(session.connection_id, credential_definition_id)
        session.state = SessionState.AUTH
        logger.info("proof_request_sent", credential_definition_id=credential_definition_id)
        await self._send_localized(session, "AUTH_PROCESS_STARTED")

    async def _logout(self, session: Session) -> None:
        session.is_authenticated = False
        session.user_name = ""
        await self.session_store.save(session)
        await self._purge_user_data(session)
        await self.memory.clear(session.connection_id)
        logger.info("user_logged_out")

    async def _purge_user_data(self, session: Session) -> None:
        """Reset the session to START keeping its id, language and timestamps."""
        session.purge_user_data()
        await self.session_store.save(session)
        logger.info("session_purged")

    # Outbound helpers

    async def _send_contextual_menu(self, session: Session) -> None:
        options = [
            MenuOption(
                id=item.id,
                title=item.label or self.content.get_string(session.lang, item.label_key or item.id),
            )
            for item in self._menu_items
            if item.visible_when.matches(session.is_authenticated) and self._is_action_enabled(item.action)
        ]

        title = self.content.get_string(session.lang, "ROOT_TITLE")
        if session.is_authenticated and session.user_name:
            title = f"{title} {session.user_name}!"

        try:
            await self.gateway.send_menu_update(session.connection_id, title, options)
        except Exception as e:
            logger.error("menu_update_failed", error=str(e))

    async def _send_localized(self, session: Session, key: str) -> None:
        await self.gateway.send_text(session.connection_id, self.content.get_string(session.lang, key))

    async def _send_generic_error(self, session: Session) -> None:
        try:
            await self._send_localized(session, "ERROR_MESSAGES")
        except Exception as e:
            logger.error("error_message_send_failed", error=str(e))

    async def _record_stat(self, kpi: StatKpi, session: Session) -> None:
        if self.stat_sink is None:
            return
        try:
            await self.stat_sink.record_event(kpi, session.connection_id)
        except Exception as e:
            logger.warning("stat_record_failed", kpi=kpi.value, error=str(e))

    # Helpers

    def _is_action_enabled(self, action: str | None) -> bool:
        if action == MenuAction.AUTHENTICATE.value:
            return self._auth_flow.enabled
        return True

    @staticmethod
    def _is_credential_item(item: SubmittedProofItem) -> bool:
        return item.type in (None, VERIFIABLE_CREDENTIAL)

    @staticmethod
    def _user_name_from_claims(item: SubmittedProofItem) -> str:
        parts = (item.claim("firstName"), item.claim("lastName"))
        return " ".join(part.strip() for part in parts if part and part.strip())

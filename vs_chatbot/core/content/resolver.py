"""
Content Resolver - read-only, language-keyed access to agent content.

Looks up strings, prompts, menu definitions and flow switches from the
agent pack, falling back to the built-in tables. Built once at startup and
shared by every session worker without locking.
"""

from dataclasses import dataclass
from typing import Any

import structlog

from vs_chatbot.config.agent_pack import AgentPack, LanguageBlock
from vs_chatbot.core.content.translations import (
    BASELINE_LANGUAGE,
    DEFAULT_TRANSLATIONS,
    PROMPT_TEMPLATES,
    WELCOME_TEMPLATES,
)
from vs_chatbot.models import MenuAction, MenuItem, VisibleWhen

logger = structlog.get_logger(__name__)

DEFAULT_MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem(
        id="authenticate",
        label_key="CREDENTIAL",
        action=MenuAction.AUTHENTICATE.value,
        visible_when=VisibleWhen.UNAUTHENTICATED,
    ),
    MenuItem(
        id="logout",
        label_key="LOGOUT",
        action=MenuAction.LOGOUT.value,
        visible_when=VisibleWhen.AUTHENTICATED,
    ),
)


@dataclass(frozen=True)
class WelcomeFlowConfig:
    enabled: bool = True
    send_on_profile: bool = True
    template_key: str = "welcomeMessage"


@dataclass(frozen=True)
class AuthFlowConfig:
    enabled: bool = True
    credential_definition_id: str | None = None


def to_boolean(value: Any, fallback: bool) -> bool:
    """Coerce a manifest flag, accepting the usual string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "1", "yes"):
            return True
        if normalized in ("false", "0", "no"):
            return False
    return fallback


class ContentResolver:
    """Language-aware lookup over the agent pack and built-in content."""

    def __init__(
        self,
        pack: AgentPack | None = None,
        credential_definition_id: str | None = None,
        agent_prompt: str = "",
    ) -> None:
        self._pack = pack
        self._languages: dict[str, LanguageBlock] = dict(pack.languages or {}) if pack else {}
        self._default_language = (
            pack.metadata.default_language if pack and pack.metadata else BASELINE_LANGUAGE
        )
        self._agent_prompt = agent_prompt

        flows = pack.flows if pack else None
        self._menu_items = self._build_menu_items(flows.menu.items if flows and flows.menu else None)

        welcome = flows.welcome if flows else None
        self._welcome_flow = WelcomeFlowConfig(
            enabled=to_boolean(welcome.enabled if welcome else None, True),
            send_on_profile=to_boolean(welcome.send_on_profile if welcome else None, True),
            template_key=(welcome.template_key if welcome and welcome.template_key else "welcomeMessage"),
        )

        auth = flows.authentication if flows else None
        self._auth_flow = AuthFlowConfig(
            enabled=to_boolean(auth.enabled if auth else None, True),
            credential_definition_id=(
                auth.credential_definition_id if auth and auth.credential_definition_id
                else credential_definition_id
            ),
        )

    @staticmethod
    def _build_menu_items(items: list | None) -> tuple[MenuItem, ...]:
        if not items:
            return DEFAULT_MENU_ITEMS
        return tuple(
            MenuItem(
                id=item.id,
                label_key=item.label_key,
                label=item.label,
                action=item.action,
                visible_when=VisibleWhen(item.visible_when or VisibleWhen.ALWAYS.value),
            )
            for item in items
        )

    # Language resolution

    def _has_block(self, lang: str | None) -> bool:
        if not lang:
            return False
        if self._languages:
            return lang in self._languages
        return lang in DEFAULT_TRANSLATIONS

    def resolve_language(self, requested: str | None = None) -> str:
        """
        Map a requested language to one that has content.

        Chain: requested (region subtag stripped) -> pack default language
        -> baseline language.
        """
        normalized = (requested or "").split("-")[0].split("_")[0].strip().lower()
        if self._has_block(normalized):
            return normalized
        if self._has_block(self._default_language):
            return self._default_language
        return BASELINE_LANGUAGE

    def get_default_language(self) -> str:
        return self.resolve_language(self._default_language)

    # Strings

    def get_strings(self, lang: str | None) -> dict[str, str]:
        lang_key = self.resolve_language(lang)
        block = self._languages.get(lang_key)
        if block and block.strings:
            return block.strings
        return DEFAULT_TRANSLATIONS.get(lang_key, DEFAULT_TRANSLATIONS[BASELINE_LANGUAGE])

    def get_string(self, lang: str | None, key: str) -> str:
        """Localized string for ``key``. Never fails: degrades to the key itself."""
        value = self.get_strings(lang).get(key)
        if value is None:
            value = DEFAULT_TRANSLATIONS[BASELINE_LANGUAGE].get(key)
        if value is None:
            logger.debug("missing_translation", lang=lang, key=key)
            return key
        return value

    # Prompts and templates

    def get_welcome_message(self, lang: str | None, template_key: str = "welcomeMessage") -> str:
        lang_key = self.resolve_language(lang)
        block = self._languages.get(lang_key)
        if block:
            value = block.template(template_key)
            if value and value.strip():
                return value
        return WELCOME_TEMPLATES.get(lang_key, WELCOME_TEMPLATES[BASELINE_LANGUAGE])

    def get_system_prompt(self, lang: str | None) -> str:
        block = self._languages.get(self.resolve_language(lang))
        if block and block.system_prompt:
            return block.system_prompt
        pack_prompt = self._pack.llm.agent_prompt if self._pack and self._pack.llm else None
        if pack_prompt and pack_prompt.strip():
            return pack_prompt
        return self._agent_prompt

    def build_prompt(
        self,
        lang: str | None,
        context: str,
        question: str,
        user_name: str | None = None,
    ) -> str:
        """
        Build the user prompt for one question.

        The system prompt travels separately, see ``get_system_prompt``.
        """
        lang_key = self.resolve_language(lang)
        block = self._languages.get(lang_key)

        if not block or not block.system_prompt:
            template = PROMPT_TEMPLATES.get(lang_key, PROMPT_TEMPLATES[BASELINE_LANGUAGE])
            return template(context, question, user_name)

        user_line = f"Current user name: {user_name}" if user_name else ""
        parts = [user_line, "Context:", context, "Question:", question]
        return "\n\n".join(part for part in parts if part)

    # Flow configuration

    def get_menu_items(self) -> tuple[MenuItem, ...]:
        return self._menu_items

    def get_welcome_flow_config(self) -> WelcomeFlowConfig:
        return self._welcome_flow

    def get_auth_flow_config(self) -> AuthFlowConfig:
        return self._auth_flow

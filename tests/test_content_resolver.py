import pytest

from vs_chatbot.config.agent_pack import AgentPack
from vs_chatbot.core.content import ContentResolver
from vs_chatbot.core.content.resolver import DEFAULT_MENU_ITEMS, to_boolean
from vs_chatbot.core.content.translations import WELCOME_TEMPLATES
from vs_chatbot.models import VisibleWhen


@pytest.fixture
def pack():
    return AgentPack.model_validate({
        "metadata": {"id": "demo", "displayName": "Demo", "defaultLanguage": "es"},
        "languages": {
            "es": {
                "greetingMessage": "Hola desde el pack",
                "systemPrompt": "Eres un asistente.",
                "strings": {"ROOT_TITLE": "Hola"},
            },
            "fr": {"strings": {"ROOT_TITLE": "Salut"}},
        },
    })


def test_builtin_language_resolution():
    content = ContentResolver()

    assert content.resolve_language("fr") == "fr"
    assert content.resolve_language("es-AR") == "es"
    assert content.resolve_language("de") == "en"
    assert content.resolve_language(None) == "en"


def test_pack_language_falls_back_to_pack_default(pack):
    content = ContentResolver(pack=pack)

    assert content.resolve_language("fr_CA") == "fr"
    assert content.resolve_language("de") == "es"
    assert content.resolve_language(None) == "es"
    assert content.get_default_language() == "es"


def test_unknown_pack_default_falls_back_to_baseline():
    pack = AgentPack.model_validate({
        "metadata": {"id": "x", "displayName": "X", "defaultLanguage": "it"},
        "languages": {"de": {}},
    })

    content = ContentResolver(pack=pack)

    assert content.resolve_language("pt") == "en"
    assert content.get_default_language() == "en"


def test_get_string_prefers_pack_block(pack):
    content = ContentResolver(pack=pack)

    assert content.get_string("es", "ROOT_TITLE") == "Hola"
    assert content.get_string("fr", "ROOT_TITLE") == "Salut"


def test_get_string_falls_back_to_baseline_then_key(pack):
    content = ContentResolver(pack=pack)

    assert content.get_string("es", "LOGOUT") == "Logout"
    assert content.get_string("es", "NOT_A_KEY") == "NOT_A_KEY"


def test_builtin_strings_are_localized():
    content = ContentResolver()

    assert content.get_string("es", "LOGOUT") == "Cerrar sesión"
    assert content.get_string("fr", "AUTH_ERROR") == "Erreur d'authentification"
    assert content.get_string("fr", "LOGIN_REQUIRED") == "Please log in to continue."


def test_welcome_message_from_pack_or_builtin(pack):
    assert ContentResolver(pack=pack).get_welcome_message("es") == "Hola desde el pack"
    assert ContentResolver(pack=pack).get_welcome_message("fr") == WELCOME_TEMPLATES["fr"]
    assert ContentResolver().get_welcome_message("en") == WELCOME_TEMPLATES["en"]


def test_welcome_message_custom_template_key():
    pack = AgentPack.model_validate({"languages": {"en": {"returningMessage": "Welcome back"}}})

    assert ContentResolver(pack=pack).get_welcome_message("en", "returningMessage") == "Welcome back"


def test_system_prompt_fallback_chain(pack):
    assert ContentResolver(pack=pack).get_system_prompt("es") == "Eres un asistente."
    assert ContentResolver(pack=pack, agent_prompt="Be nice.").get_system_prompt("fr") == "Be nice."

    with_llm = AgentPack.model_validate({"llm": {"agentPrompt": "From pack."}})
    assert ContentResolver(pack=with_llm, agent_prompt="Be nice.").get_system_prompt("en") == "From pack."


def test_build_prompt_uses_builtin_template_without_system_prompt():
    prompt = ContentResolver().build_prompt("es", context="docs", question="¿Qué?", user_name="Ada")

    assert "El nombre del usuario es Ada." in prompt
    assert "Contexto:\ndocs" in prompt
    assert "Pregunta: ¿Qué?" in prompt


def test_build_prompt_with_pack_system_prompt(pack):
    prompt = ContentResolver(pack=pack).build_prompt("es", context="docs", question="q")

    assert prompt == "Context:\n\ndocs\n\nQuestion:\n\nq"
    assert "Eres un asistente." not in prompt


def test_default_menu_and_flows():
    content = ContentResolver(credential_definition_id="cred")

    assert content.get_menu_items() == DEFAULT_MENU_ITEMS
    assert content.get_welcome_flow_config().enabled is True
    assert content.get_auth_flow_config().credential_definition_id == "cred"


def test_pack_flows_override_defaults():
    pack = AgentPack.model_validate({
        "flows": {
            "welcome": {"enabled": "no", "templateKey": "greetingMessage"},
            "authentication": {"credentialDefinitionId": "pack-cred"},
            "menu": {"items": [{"id": "help", "label": "Help"}]},
        }
    })
    content = ContentResolver(pack=pack, credential_definition_id="env-cred")

    assert content.get_welcome_flow_config().enabled is False
    assert content.get_welcome_flow_config().template_key == "greetingMessage"
    assert content.get_auth_flow_config().credential_definition_id == "pack-cred"
    [item] = content.get_menu_items()
    assert item.label == "Help"
    assert item.visible_when == VisibleWhen.ALWAYS


@pytest.mark.parametrize(
    "value, fallback, expected",
    [
        (True, False, True),
        ("yes", False, True),
        (" FALSE ", True, False),
        ("0", True, False),
        ("maybe", True, True),
        (None, False, False),
    ],
)
def test_to_boolean(value, fallback, expected):
    assert to_boolean(value, fallback) is expected

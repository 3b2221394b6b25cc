import pytest

from vs_chatbot.utils.language import detect_language


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Hello, could you tell me when the main office opens during the week?", "en"),
        ("Hola, ¿me podrías decir cuándo abre la oficina principal durante la semana?", "es"),
        ("Bonjour, pouvez-vous me dire quand le bureau principal ouvre pendant la semaine ?", "fr"),
    ],
)
def test_detects_language(text, expected):
    assert detect_language(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "12345 !!! ..."])
def test_undetectable_text_falls_back_to_english(text):
    assert detect_language(text) == "en"


def test_custom_default():
    assert detect_language("", default="es") == "es"

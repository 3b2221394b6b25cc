"""
Built-in localized content used when the agent pack does not provide it.
Extend these maps to support more languages.
"""

from typing import Callable

BASELINE_LANGUAGE = "en"

DEFAULT_TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "ROOT_TITLE": "Welcome!",
        "LOGOUT": "Logout",
        "CREDENTIAL": "Authenticate",
        "WELCOME": "Welcome! I am Agent, your smart agent.",
        "LOGIN_REQUIRED": "Please log in to continue.",
        "AUTH_REQUIRED": "Authentication is required to access this feature.",
        "AUTH_SUCCESS": "Authentication completed successfully. You can now access all features.",
        "AUTH_SUCCESS_NAME": "Authentication successful. Welcome, {name}! you can now access all features.",
        "AUTH_ERROR": "Authentication error",
        "WAITING_CREDENTIAL": "Waiting for you to complete the credential process...",
        "AUTH_PROCESS_STARTED": "Authentication process has started. Please respond to the credential request.",
        "STATS_ERROR": "Sorry, we could not retrieve your statistics at the moment.",
        "ERROR_MESSAGES": "The service is not available at the moment. Please try again later.",
    },
    "es": {
        "ROOT_TITLE": "¡Bienvenido!",
        "LOGOUT": "Cerrar sesión",
        "CREDENTIAL": "Autenticar",
        "WELCOME": "¡Bienvenido! Soy Agent, tu agente inteligente.",
        "AUTH_REQUIRED": "Se requiere autenticación para acceder a esta función.",
        "AUTH_SUCCESS": "Autenticación completada con éxito. Ahora puedes acceder a todas las funciones.",
        "AUTH_SUCCESS_NAME": (
            "Autenticación completada con éxito. ¡Bienvenido, {name}! ahora puedes acceder a todas las funciones."
        ),
        "AUTH_ERROR": "Error de autenticación",
        "WAITING_CREDENTIAL": "Esperando que completes el proceso de credencial...",
        "AUTH_PROCESS_STARTED": (
            "El proceso de autenticación ha comenzado. Por favor, responde a la solicitud de credencial."
        ),
        "STATS_ERROR": "Lo sentimos, no pudimos obtener tus estadísticas en este momento.",
        "ERROR_MESSAGES": "El servicio no está disponible en este momento. Por favor, intenta de nuevo más tarde.",
    },
    "fr": {
        "ROOT_TITLE": "Bienvenue !",
        "LOGOUT": "Déconnexion",
        "CREDENTIAL": "Authentifier",
        "WELCOME": "Bienvenue ! Je suis Agent, votre agent intelligent.",
        "AUTH_REQUIRED": "L'authentification est requise pour accéder à cette fonctionnalité.",
        "AUTH_SUCCESS": "Authentification réussie. Vous pouvez maintenant accéder à toutes les fonctionnalités.",
        "AUTH_SUCCESS_NAME": (
            "Authentification réussie. Bienvenue, {name} ! "
            "Vous pouvez maintenant accéder à toutes les fonctionnalités."
        ),
        "AUTH_ERROR": "Erreur d'authentification",
        "WAITING_CREDENTIAL": "En attente de la fin du processus d'authentification...",
        "AUTH_PROCESS_STARTED": (
            "Le processus d'authentification a commencé. Veuillez répondre à la demande de justificatif."
        ),
        "STATS_ERROR": "Désolé, nous n'avons pas pu récupérer vos statistiques pour le moment.",
        "ERROR_MESSAGES": "Le service n'est pas disponible pour le moment. Veuillez réessayer plus tard.",
    },
}

WELCOME_TEMPLATES: dict[str, str] = {
    "en": "Hi there! 👋 I'm your smart assistant. Ask me anything, or authenticate from the menu to unlock more.",
    "es": "¡Hola! 👋 Soy tu asistente inteligente. Pregúntame lo que quieras o autentícate desde el menú.",
    "fr": "Bonjour ! 👋 Je suis votre assistant intelligent. Posez-moi vos questions ou authentifiez-vous depuis le menu.",
    "pt": "Olá! 👋 Eu sou o seu assistente inteligente. Pergunte o que quiser ou autentique-se pelo menu.",
}


def _english_prompt(context: str, question: str, user_name: str | None) -> str:
    user_line = f"The user's name is {user_name}.\n" if user_name else ""
    return (
        "Use the following information as context to answer the user's question.\n"
        f"{user_line}"
        f"Context:\n{context}\n"
        f"Question: {question}\n"
        "Respond clearly and briefly in English."
    )


def _spanish_prompt(context: str, question: str, user_name: str | None) -> str:
    user_line = f"El nombre del usuario es {user_name}.\n" if user_name else ""
    return (
        "Usa la siguiente información como contexto para responder la pregunta del usuario.\n"
        f"{user_line}"
        f"Contexto:\n{context}\n"
        f"Pregunta: {question}\n"
        "Responde de forma clara y breve en español."
    )


def _french_prompt(context: str, question: str, user_name: str | None) -> str:
    user_line = f"Le nom de l'utilisateur est {user_name}.\n" if user_name else ""
    return (
        "Utilise les informations suivantes comme contexte pour répondre à la question de l'utilisateur.\n"
        f"{user_line}"
        f"Contexte :\n{context}\n"
        f"Question : {question}\n"
        "Réponds de manière claire et concise en français."
    )


PROMPT_TEMPLATES: dict[str, Callable[[str, str, str | None], str]] = {
    "en": _english_prompt,
    "es": _spanish_prompt,
    "fr": _french_prompt,
}

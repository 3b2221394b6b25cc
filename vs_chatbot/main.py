"""
Main entry point for the VS Agent chatbot.
"""

import uvicorn

from vs_chatbot.config import get_settings
from vs_chatbot.utils.logging import setup_logging


def main() -> None:
    """Run the chatbot application."""
    settings = get_settings()
    setup_logging(settings)

    uvicorn.run(
        "vs_chatbot.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=settings.api.workers if not settings.api.debug else 1,
        reload=settings.api.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

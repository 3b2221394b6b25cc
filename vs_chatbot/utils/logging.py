"""
Logging configuration using structlog.

Console output while developing, one JSON object per line in production.
Every event carries the service name and environment so log lines from
several chatbot deployments can share a sink.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from vs_chatbot.config import Settings, get_settings

SERVICE_NAME = "vs-chatbot"

# Libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def _service_context(environment: str) -> Processor:
    def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structured logging for the process."""
    settings = settings or get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Standard library logging carries uvicorn output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.environment == "production":
        processors = shared_processors + [
            _service_context(settings.environment),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

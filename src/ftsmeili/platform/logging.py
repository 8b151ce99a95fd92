"""
ftsmeili Structured Logging

Configures structured logging using structlog. Every event carries the
application name and environment; once the platform is loaded it also
carries the Meilisearch host and index it talks to.
"""

import logging
import sys

import structlog

from ftsmeili.platform.config import Settings, settings as default_settings

# httpx logs every request at INFO; the store logs its own events.
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structured logging for the application."""
    settings = settings or default_settings

    log_level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            # Render to JSON in production, console in development
            structlog.processors.JSONRenderer()
            if settings.APP_ENV == "production"
            else structlog.dev.ConsoleRenderer(colors=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.contextvars.bind_contextvars(app=settings.APP_NAME, env=settings.APP_ENV)


def bind_engine_context(host: str, index: str) -> None:
    """Tag subsequent events with the Meilisearch host and index in use."""
    structlog.contextvars.bind_contextvars(meilisearch_host=host, meilisearch_index=index)


def clear_engine_context() -> None:
    structlog.contextvars.unbind_contextvars("meilisearch_host", "meilisearch_index")


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)

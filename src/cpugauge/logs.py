"""structlog setup for cpugauge."""

import logging

import structlog

from cpugauge.config import get_settings


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """
    Configure structlog for the host process.

    Args:
        level: Minimum level name, e.g. ``"INFO"``. Defaults to ``LOG_LEVEL``.
        json: Render JSON lines instead of the console format. Defaults to
            ``LOG_JSON``.
    """
    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json = settings.LOG_JSON if json is None else json

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelNamesMapping()[level.upper()]),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

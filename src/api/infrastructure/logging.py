"""Structlog configuration for the application.

Configures structlog with colored console output for development
and JSON output for production. Alembic and SQLAlchemy log through the
standard library; alembic is routed to stderr at the same level so
per-store migration output shows up next to the probe events.
"""

import logging
import os
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog and the standard library loggers it sits beside.

    Uses colored console output when FORCE_COLOR is set or stdout is a
    TTY, otherwise JSON.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = logging.getLevelName(level.upper())
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    use_colors = force_color or sys.stdout.isatty()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_colors:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True
        )
        processors = [*shared_processors, renderer]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        stream=sys.stderr,
        format="%(levelname)s [%(name)s] %(message)s",
        level=numeric_level,
    )
    logging.getLogger("alembic").setLevel(numeric_level)
    # Statement echo is never wanted in service logs
    logging.getLogger("sqlalchemy.engine").setLevel(
        max(numeric_level, logging.WARNING)
    )

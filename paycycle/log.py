"""
Structured Logging

Every refresh of the weekly overview is logged as structured events.
Related events share a correlation id (`refresh_id`) so that one
load -> validate -> aggregate pass can be traced end to end.

Logging never feeds back into the engine: the computations are pure and
the log calls only observe them.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from paycycle.config import LoggingSettings, get_settings


_configured = False


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog on top of the stdlib logging module.

    Safe to call more than once; only the first call takes effect unless
    `settings` is passed explicitly.
    """
    global _configured
    if _configured and settings is None:
        return

    settings = settings or get_settings().logging

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.level),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger, configuring logging on first use."""
    configure_logging()
    return structlog.get_logger(name)


def create_refresh_id() -> UUID:
    """
    Create a new correlation ID for one refresh of the weekly overview.

    Bind it to the logger at the start of the refresh and pass it
    through every subsequent step.
    """
    return uuid4()

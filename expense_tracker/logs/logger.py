"""
Structured Logging

Every request-level action (registration, login, expense changes) emits one
structured event. Events are rendered as JSON lines through the stdlib
logging machinery so that log level filtering and handlers keep working.

Passwords, password hashes and tokens are never passed to the logger.
"""

import logging
import sys

import structlog


_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; only the level is updated on later calls.
    """
    global _configured

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    logging.getLogger().setLevel(level)

    if _configured:
        return

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
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)

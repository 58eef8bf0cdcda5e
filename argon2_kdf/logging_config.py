############################################################
#
# argon2-kdf - Argon2 Password Hashing and Key Derivation
#
# logging_config.py: Structured logging configuration using structlog
#
# Luke Sheneman
# Research Computing and Data Services (RCDS)
# Institute for Interdisciplinary Data Sciences (IIDS)
# University of Idaho
# sheneman@uidaho.edu
#
############################################################

"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from argon2_kdf.settings import Settings, get_settings

REDACTED = "[REDACTED]"
SENSITIVE_KEYS = frozenset(
    {"password", "secret", "pepper", "salt", "hash", "derived_key", "key"}
)


def redact_sensitive(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
    """Replace values of sensitive keys before they reach a renderer."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


# Common processors for all log output
_shared_processors: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.PositionalArgumentsFormatter(),
    redact_sensitive,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]

# argon2_kdf loggers skip disabled levels before doing any work
_library_processors: list[Processor] = [structlog.stdlib.filter_by_level] + _shared_processors

# Silent until the application attaches handlers
logging.getLogger("argon2_kdf").addHandler(logging.NullHandler())


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging for applications using argon2-kdf."""
    settings = settings or get_settings()

    # Determine log level
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=_shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    handlers: list[logging.Handler] = [console_handler]
    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logger = logging.getLogger("argon2_kdf")
    logger.handlers = handlers
    logger.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger backed by the stdlib logger of the same name.

    Events pass through the redaction chain and are then handed to stdlib
    logging, so nothing is emitted unless the application (or
    setup_logging) has attached a handler.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_library_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
    )

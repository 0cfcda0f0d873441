"""Structured logging setup with structlog.

Components log snake_case events through :func:`get_logger`; the bot a
command targets is carried as ``bot_id`` via contextvars for the duration of
:func:`bot_context`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from bot_state.config.schema import LoggingConfig

LOG_FORMATS = ("json", "console")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}, expected one of {LOG_FORMATS}")
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Route structlog and stdlib records (uvicorn, sqlalchemy) to one stderr handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" for production, "console" for development.
    """
    renderer = _renderer(log_format)
    shared = _shared_processors()

    # Not cached: module-level loggers must follow a later reconfiguration
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def setup_logging_from_config(config: LoggingConfig) -> None:
    setup_logging(level=config.level, log_format=config.format)


def get_logger(component: str, **initial_context) -> structlog.stdlib.BoundLogger:
    """Logger for one component ("engine", "registry", "api", ...)."""
    logger = structlog.get_logger(component)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


@contextmanager
def bot_context(bot_id: str) -> Iterator[None]:
    """Tag every event logged inside the block with *bot_id*."""
    with structlog.contextvars.bound_contextvars(bot_id=bot_id):
        yield

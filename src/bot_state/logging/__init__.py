"""Structured logging."""

from bot_state.logging.setup import bot_context, get_logger, setup_logging, setup_logging_from_config

__all__ = ["bot_context", "get_logger", "setup_logging", "setup_logging_from_config"]

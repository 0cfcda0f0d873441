"""Configuration system."""

from bot_state.config.loader import load_config
from bot_state.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
